"""Configuration management for Branch Updater."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from branch_updater.constants import (
    COMMIT_SAVE_FILE,
    DEFAULT_APP_COMMAND,
    DEFAULT_APP_ENTRYPOINT,
    DEFAULT_REMOTE_NAME,
    GIT_HOST,
    GITHUB_API_URL,
)

REQUIRED_FIELDS = ("owner_name", "repo_name", "branch_name", "build_cmd")


class ConfigurationError(ValueError):
    """Raised when required configuration is missing or invalid."""


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Built once at startup and passed explicitly to the agent; the model is
    frozen so nothing downstream can mutate it.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Tracked repository (required)
    owner_name: str = Field(description="Account or organization owning the repository")
    repo_name: str = Field(description="Repository name")
    branch_name: str = Field(description="Branch whose head commit is tracked")
    build_cmd: str = Field(description="Shell command run after a successful checkout")

    # Working tree and managed application
    work_dir: str = Field(default=".", description="Working tree the agent operates in")
    commit_file: str = Field(
        default=COMMIT_SAVE_FILE, description="Marker file holding the last applied commit"
    )
    app_entrypoint: str = Field(
        default=DEFAULT_APP_ENTRYPOINT, description="Artifact that must exist before launch"
    )
    app_command: str = Field(
        default=DEFAULT_APP_COMMAND, description="Shell command that launches the application"
    )

    # Remote
    remote_name: str = Field(default=DEFAULT_REMOTE_NAME, description="Git remote to fetch")
    git_host: str = Field(default=GIT_HOST, description="Host used in the remote URL")
    github_api_url: str = Field(default=GITHUB_API_URL, description="GitHub REST API base URL")
    lookup_timeout: float | None = Field(
        default=None, description="Branch lookup timeout in seconds (None = wait forever)"
    )

    # Application
    environment: str = Field(default="production", description="Environment name")
    log_level: str = Field(default="INFO", description="Logging level")
    log_to_file: bool = Field(default=False, description="Also write JSON logs to a file")
    log_directory: str = Field(default="logs", description="Directory for the log file")
    log_file_max_bytes: int = Field(default=10_485_760, description="Rotate after this size")
    log_file_backup_count: int = Field(default=5, description="Rotated files to keep")

    @field_validator(*REQUIRED_FIELDS)
    @classmethod
    def _require_non_empty(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be empty")
        return value

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() == "development"

    @property
    def remote_url(self) -> str:
        """Clone URL registered as the git remote."""
        return f"https://{self.git_host}/{self.owner_name}/{self.repo_name}.git"

    @property
    def branch_api_url(self) -> str:
        """GitHub endpoint describing the tracked branch."""
        base = self.github_api_url.rstrip("/")
        return f"{base}/repos/{self.owner_name}/{self.repo_name}/branches/{self.branch_name}"

    @property
    def marker_path(self) -> Path:
        return Path(self.work_dir) / self.commit_file

    @property
    def entrypoint_path(self) -> Path:
        return Path(self.work_dir) / self.app_entrypoint

    @property
    def log_file_path(self) -> str:
        return str(Path(self.log_directory) / "branch_updater.log")


def load_settings() -> Settings:
    """Build settings from the environment.

    Raises:
        ConfigurationError: naming every missing or invalid variable.
    """
    try:
        return Settings()
    except ValidationError as exc:
        missing: list[str] = []
        invalid: list[str] = []
        for error in exc.errors():
            field = str(error["loc"][0]) if error["loc"] else "settings"
            if error["type"] == "missing" or field in REQUIRED_FIELDS:
                missing.append(field.upper())
            else:
                invalid.append(field.upper())

        parts = []
        if missing:
            parts.append(f"missing required configuration: {', '.join(missing)}")
        if invalid:
            parts.append(f"invalid configuration: {', '.join(invalid)}")
        raise ConfigurationError("; ".join(parts)) from exc


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return load_settings()
