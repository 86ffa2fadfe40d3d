"""Git operations on the working tree.

Only exit codes (and, for ``remote add``, the error text) are consulted.
"""

from __future__ import annotations

import os
import shlex
from pathlib import Path

from branch_updater.logging import get_logger
from branch_updater.process import run_command, run_streaming

log = get_logger("branch_updater.git")


def git_env() -> dict[str, str]:
    """Process environment with git messages forced to untranslated English."""
    return {**os.environ, "LC_ALL": "C"}


class GitRepository:
    """Thin wrapper over the ``git`` CLI for one working tree and remote."""

    def __init__(
        self,
        work_dir: str | Path,
        remote_name: str,
        remote_url: str,
        branch: str,
    ) -> None:
        self._work_dir = Path(work_dir)
        self._remote_name = remote_name
        self._remote_url = remote_url
        self._branch = branch

    @property
    def tracking_ref(self) -> str:
        return f"{self._remote_name}/{self._branch}"

    async def ensure_remote(self) -> bool:
        """Register the remote, tolerating one that is already registered.

        Returns True when the remote is known to exist afterwards. Every
        failure is logged as a warning; only "already exists" still counts as
        success. Callers carry on either way and let ``fetch`` decide.
        """
        cmd = f"git remote add {shlex.quote(self._remote_name)} {shlex.quote(self._remote_url)}"
        result = await run_command(cmd, cwd=self._work_dir, env=git_env())
        if result.ok:
            log.info("git_remote_added", remote=self._remote_name, url=self._remote_url)
            return True

        if "already exists" in result.stderr:
            log.warning("git_remote_exists", remote=self._remote_name)
            return True

        log.warning(
            "git_remote_add_failed",
            remote=self._remote_name,
            returncode=result.returncode,
            stderr=result.stderr.strip()[:500],
        )
        return False

    async def fetch(self) -> bool:
        """Fetch the remote. Returns True on success."""
        result = await run_command(
            f"git fetch {shlex.quote(self._remote_name)}",
            cwd=self._work_dir,
            env=git_env(),
        )
        if not result.ok:
            log.error(
                "git_fetch_failed",
                remote=self._remote_name,
                returncode=result.returncode,
                stderr=result.stderr.strip()[:500],
            )
            return False
        return True

    async def checkout_branch(self) -> int:
        """Overwrite tracked files with the remote branch's tree.

        Returns the git exit code; stderr is streamed into the log.
        """
        cmd = f"git checkout {shlex.quote(self.tracking_ref)} -- ."
        return await run_streaming(cmd, cwd=self._work_dir, env=git_env())
