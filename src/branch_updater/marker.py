"""Persisted record of the last applied commit."""

from __future__ import annotations

from pathlib import Path

from branch_updater.constants import SHA_HASH_LENGTH
from branch_updater.logging import get_logger

log = get_logger("branch_updater.marker")


class CommitMarker:
    """Reads and writes the marker file.

    The file holds the raw ASCII revision id with no trailing newline. Any
    content that is not exactly ``SHA_HASH_LENGTH`` bytes is treated as
    "never updated".
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> str | None:
        """Return the stored revision id, or None when absent or invalid."""
        try:
            raw = self._path.read_bytes()
        except FileNotFoundError:
            log.debug("marker_missing", path=str(self._path))
            return None
        except OSError as exc:
            log.debug("marker_read_failed", path=str(self._path), error=str(exc))
            return None

        if len(raw) != SHA_HASH_LENGTH:
            log.debug("marker_invalid_length", path=str(self._path), length=len(raw))
            return None

        try:
            return raw.decode("ascii")
        except UnicodeDecodeError:
            log.debug("marker_not_ascii", path=str(self._path))
            return None

    def save(self, sha: str) -> bool:
        """Overwrite the marker with *sha*. Returns False if the write failed."""
        try:
            self._path.write_bytes(sha.encode("ascii"))
        except (OSError, UnicodeEncodeError) as exc:
            log.error("marker_save_failed", path=str(self._path), error=str(exc))
            return False
        return True
