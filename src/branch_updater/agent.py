"""Update agent.

One invocation runs the whole sequence:

1. Load the last applied commit from the marker file
2. Ask GitHub for the tracked branch's head commit
3. If it differs: register the remote, fetch, checkout the branch tree,
   persist the new marker and run the build command
4. Launch the application, whatever happened above

Every failure is logged and turned into "keep the current tree"; nothing
raised by a step escapes ``run()``.
"""

from __future__ import annotations

from datetime import UTC, datetime

from branch_updater.config import Settings
from branch_updater.git import GitRepository
from branch_updater.github import BranchLookup
from branch_updater.logging import get_logger
from branch_updater.marker import CommitMarker
from branch_updater.models import (
    DetachedProcess,
    RemoteHead,
    RunResult,
    Unavailable,
    UpdateStatus,
)
from branch_updater.process import launch_detached, run_streaming

log = get_logger("branch_updater.agent")


class UpdateAgent:
    """Runs check → fetch → build → launch once."""

    def __init__(
        self,
        settings: Settings,
        lookup: BranchLookup | None = None,
        repo: GitRepository | None = None,
        marker: CommitMarker | None = None,
    ) -> None:
        self._settings = settings
        self._lookup = lookup or BranchLookup(
            settings.branch_api_url,
            timeout=settings.lookup_timeout,
        )
        self._repo = repo or GitRepository(
            work_dir=settings.work_dir,
            remote_name=settings.remote_name,
            remote_url=settings.remote_url,
            branch=settings.branch_name,
        )
        self._marker = marker or CommitMarker(settings.marker_path)

    # ------------------------------------------------------------------
    # Entry point
    # ------------------------------------------------------------------

    async def run(self) -> RunResult:
        """Execute one update pass and launch the application."""
        saved = self.load_marker()
        head = await self.determine_remote_head()
        result = RunResult(status=UpdateStatus.UP_TO_DATE, previous_sha=saved)

        if isinstance(head, Unavailable):
            log.warning("updater_lookup_failed", reason=head.reason)
            result.status = UpdateStatus.LOOKUP_FAILED
            result.error = head.reason or "remote head unknown"
        elif head.sha == saved:
            log.info("updater_up_to_date", sha=saved)
            result.target_sha = head.sha
        else:
            result.target_sha = head.sha
            try:
                await self._synchronize(result, head.sha)
            except Exception as exc:
                log.exception("updater_unexpected_error", sha=head.sha)
                result.status = UpdateStatus.FAILED
                result.error = f"Unexpected error: {exc}"

        result.launched = self.launch_application()
        if result.launched is not None:
            result.steps_completed.append("launch")

        result.completed_at = datetime.now(UTC).isoformat()
        log.info("updater_run_complete", **result.to_dict())
        return result

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    async def determine_remote_head(self) -> RemoteHead:
        return await self._lookup.get_head()

    def load_marker(self) -> str | None:
        return self._marker.load()

    async def _synchronize(self, result: RunResult, sha: str) -> None:
        """Bring the working tree to *sha* and rebuild.

        Stops at the first failing step; ``result`` records how far it got.
        """
        log.info("updater_update_available", current=result.previous_sha, latest=sha)

        if await self._repo.ensure_remote():
            result.steps_completed.append("remote_add")

        if not await self._repo.fetch():
            log.error("updater_fetch_failed", fallback="previous_build")
            result.status = UpdateStatus.FETCH_FAILED
            result.error = "git fetch failed"
            return
        result.steps_completed.append("git_fetch")

        code = await self._repo.checkout_branch()
        if code != 0:
            log.error("updater_checkout_failed", returncode=code)
            result.status = UpdateStatus.CHECKOUT_FAILED
            result.error = f"git checkout exited with {code}"
            return
        result.steps_completed.append("git_checkout")

        # Persisted from the head seen at lookup time, not re-read after checkout.
        if not self._marker.save(sha):
            result.status = UpdateStatus.PERSIST_FAILED
            result.error = "failed to save commit marker"
            return
        result.steps_completed.append("marker_saved")
        log.info("updater_updated", sha=sha)

        returncode = await self.build()
        result.build_returncode = returncode
        if returncode != 0:
            log.warning("updater_build_failed", returncode=returncode, fallback="previous_build")
            result.status = UpdateStatus.BUILD_FAILED
            result.error = f"build exited with {returncode}"
            return
        result.steps_completed.append("build")
        result.status = UpdateStatus.UPDATED

    async def build(self) -> int:
        """Run the configured build command and return its exit code."""
        log.info("updater_build_started", cmd=self._settings.build_cmd)
        return await run_streaming(self._settings.build_cmd, cwd=self._settings.work_dir)

    def launch_application(self) -> DetachedProcess | None:
        """Start the application if its entry point exists."""
        entrypoint = self._settings.entrypoint_path
        if not entrypoint.exists():
            log.warning("updater_entrypoint_missing", path=str(entrypoint))
            return None
        return launch_detached(self._settings.app_command, cwd=self._settings.work_dir)
