"""Main entry point for Branch Updater."""

import asyncio
import sys

from branch_updater.agent import UpdateAgent
from branch_updater.config import ConfigurationError, get_settings
from branch_updater.logging import get_logger, setup_logging
from branch_updater.models import RunResult


async def main() -> RunResult:
    """Run a single update pass."""
    setup_logging()
    log = get_logger("branch_updater.main")

    settings = get_settings()
    log.info(
        "starting_branch_updater",
        repository=f"{settings.owner_name}/{settings.repo_name}",
        branch=settings.branch_name,
        work_dir=settings.work_dir,
    )

    agent = UpdateAgent(settings)
    return await agent.run()


def run() -> None:
    """Run the application.

    Configuration is validated before anything else; a missing required
    variable stops the process with exit status 1.
    """
    try:
        get_settings()
    except ConfigurationError as exc:
        print(f"branch-updater: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    asyncio.run(main())


if __name__ == "__main__":
    run()
