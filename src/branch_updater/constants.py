"""Centralized constants for Branch Updater."""

# Git revision ids (SHA-1, hex encoded)
SHA_HASH_LENGTH = 40

# Persisted state
COMMIT_SAVE_FILE = "last_commit"

# Remote
GITHUB_API_URL = "https://api.github.com"
GIT_HOST = "github.com"
DEFAULT_REMOTE_NAME = "origin"

# Managed application
DEFAULT_APP_ENTRYPOINT = "index.js"
DEFAULT_APP_COMMAND = "node index.js"

# Returned when a command could not be started at all
COMMAND_NOT_STARTED = 127
