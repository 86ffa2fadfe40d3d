"""Tests for the process entry point."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from branch_updater.main import main, run
from branch_updater.models import RunResult, UpdateStatus


class TestRun:
    """Tests for run()."""

    def test_missing_configuration_exits_before_work(self, monkeypatch, tmp_path, capsys):
        """Test that missing required variables stop the process with status 1."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("BRANCH_NAME")

        with patch("branch_updater.main.asyncio.run") as mock_run:
            with pytest.raises(SystemExit) as exc_info:
                run()

        assert exc_info.value.code == 1
        mock_run.assert_not_called()
        assert "BRANCH_NAME" in capsys.readouterr().err

    def test_valid_configuration_runs_main(self, monkeypatch, tmp_path):
        """Test that run() hands off to the async main."""
        monkeypatch.chdir(tmp_path)

        with patch("branch_updater.main.asyncio.run") as mock_run:
            run()

        mock_run.assert_called_once()
        mock_run.call_args.args[0].close()


class TestMain:
    """Tests for the async main()."""

    @pytest.mark.asyncio
    async def test_main_runs_agent_once(self, monkeypatch, tmp_path):
        """Test that main() configures logging and runs a single pass."""
        monkeypatch.chdir(tmp_path)
        expected = RunResult(status=UpdateStatus.UP_TO_DATE)
        agent = MagicMock()
        agent.run = AsyncMock(return_value=expected)

        with (
            patch("branch_updater.main.setup_logging") as mock_setup,
            patch("branch_updater.main.UpdateAgent", return_value=agent) as mock_agent_cls,
        ):
            result = await main()

        mock_setup.assert_called_once()
        mock_agent_cls.assert_called_once()
        settings = mock_agent_cls.call_args.args[0]
        assert settings.branch_name == "main"
        agent.run.assert_awaited_once()
        assert result is expected
