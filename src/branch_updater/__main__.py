"""Entry point for ``python -m branch_updater``."""

from branch_updater.main import run

if __name__ == "__main__":
    run()
