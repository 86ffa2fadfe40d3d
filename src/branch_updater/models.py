"""Data models for Branch Updater."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import subprocess


@dataclass(frozen=True)
class Found:
    """The remote branch head was resolved."""

    sha: str


@dataclass(frozen=True)
class Unavailable:
    """The remote branch head could not be determined."""

    reason: str = ""


RemoteHead = Found | Unavailable


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a finished subprocess."""

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


@dataclass(frozen=True)
class DetachedProcess:
    """Handle to a child process that is launched and then left alone."""

    pid: int
    command: str
    process: subprocess.Popen[bytes] | None = field(default=None, repr=False, compare=False)


class UpdateStatus(Enum):
    """Outcome of a single updater run."""

    LOOKUP_FAILED = "lookup_failed"
    UP_TO_DATE = "up_to_date"
    FETCH_FAILED = "fetch_failed"
    CHECKOUT_FAILED = "checkout_failed"
    PERSIST_FAILED = "persist_failed"
    UPDATED = "updated"
    BUILD_FAILED = "build_failed"
    FAILED = "failed"


@dataclass
class RunResult:
    """Result of one updater invocation."""

    status: UpdateStatus
    previous_sha: str | None = None
    target_sha: str | None = None
    error: str | None = None
    build_returncode: int | None = None
    launched: DetachedProcess | None = None
    steps_completed: list[str] = field(default_factory=list)
    started_at: str = field(default_factory=lambda: datetime.now(UTC).isoformat())
    completed_at: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "previous_sha": self.previous_sha,
            "target_sha": self.target_sha,
            "error": self.error,
            "build_returncode": self.build_returncode,
            "launched_pid": self.launched.pid if self.launched else None,
            "steps_completed": self.steps_completed,
            "started_at": self.started_at,
            "completed_at": self.completed_at,
        }
