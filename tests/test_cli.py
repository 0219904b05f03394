"""Tests for CLI commands."""

from typing import Iterator, Tuple
from unittest.mock import MagicMock, patch

import pytest  # type: ignore[import-not-found]
from click.testing import CliRunner  # type: ignore[import-not-found]

from mouse_idle_stats.cli.main import cli


@pytest.fixture  # type: ignore[misc]
def runner() -> CliRunner:
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture
def monitor() -> Iterator[Tuple[MagicMock, MagicMock]]:
    """Patch out the runner and console logging."""
    with patch("mouse_idle_stats.cli.main.MonitorRunner") as runner_cls, patch(
        "mouse_idle_stats.cli.main.LogHandle"
    ) as log_cls:
        runner_cls.return_value.run.return_value = 0
        runner_cls.return_value.error = None
        yield runner_cls, log_cls


class TestCLI:
    """Test the mouse-idle-stats command."""

    def test_help(self, runner: CliRunner) -> None:
        """Test --help flag."""
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "Mouse Idle Stats" in result.output
        assert "--keep-os-alive" in result.output

    def test_detection_only_by_default(
        self, runner: CliRunner, monitor: Tuple[MagicMock, MagicMock]
    ) -> None:
        """Test running without flags."""
        runner_cls, log_cls = monitor

        result = runner.invoke(cli, [])

        assert result.exit_code == 0
        config = runner_cls.call_args.args[0]
        assert config.get("keep_alive.enabled") is False
        log_cls.configure.assert_called_once_with("INFO")
        runner_cls.return_value.run.assert_called_once()

    def test_keep_os_alive_flag(
        self, runner: CliRunner, monitor: Tuple[MagicMock, MagicMock]
    ) -> None:
        """Test --keep-os-alive enables keep-alive."""
        runner_cls, _ = monitor

        result = runner.invoke(cli, ["--keep-os-alive"])

        assert result.exit_code == 0
        config = runner_cls.call_args.args[0]
        assert config.get("keep_alive.enabled") is True

    def test_fatal_error_exits_one(
        self, runner: CliRunner, monitor: Tuple[MagicMock, MagicMock]
    ) -> None:
        """Test exit code after a detector failure."""
        runner_cls, _ = monitor
        try:
            raise RuntimeError("pointer source gone")
        except RuntimeError as e:
            runner_cls.return_value.error = e
        runner_cls.return_value.run.return_value = 1

        result = runner.invoke(cli, [])

        assert result.exit_code == 1

    def test_unknown_flag_rejected(self, runner: CliRunner) -> None:
        """Test that no other flags are accepted."""
        result = runner.invoke(cli, ["--config", "x.yml"])

        assert result.exit_code == 2
