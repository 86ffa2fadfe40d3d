"""Shared pytest fixtures."""

from __future__ import annotations

import pytest

from branch_updater.config import Settings, get_settings


@pytest.fixture(autouse=True)
def _required_env(monkeypatch: pytest.MonkeyPatch):
    """Provide the required variables and reset the settings cache."""
    monkeypatch.setenv("OWNER_NAME", "octo")
    monkeypatch.setenv("REPO_NAME", "widget")
    monkeypatch.setenv("BRANCH_NAME", "main")
    monkeypatch.setenv("BUILD_CMD", "true")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def make_settings(tmp_path):
    """Factory for Settings rooted in a temporary working tree."""

    def _make(**overrides) -> Settings:
        values = {
            "owner_name": "octo",
            "repo_name": "widget",
            "branch_name": "main",
            "build_cmd": "true",
            "work_dir": str(tmp_path),
            "_env_file": None,
        }
        values.update(overrides)
        return Settings(**values)

    return _make
