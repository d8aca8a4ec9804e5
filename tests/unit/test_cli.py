# tests/unit/test_cli.py
"""
CLI unit tests.

Tests each command via typer's CliRunner. run_daemon() and logging setup
are patched out; config files live in tmp_path.
"""

import errno
import signal
from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from sigdaemon.cli import app
from sigdaemon.errors import SetupError
from sigdaemon.models.lifecycle import DaemonResult
from sigdaemon.supervisor import CommandSupervisor

runner = CliRunner()


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    return tmp_path / "config.yaml"


@pytest.fixture
def live_pid_file(tmp_path: Path):
    """A PID file owned by a (pretend) live process 4242."""
    pid_path = tmp_path / "daemon.pid"
    pid_path.write_text("4242\n")
    with patch("sigdaemon.pidfile.psutil.pid_exists", return_value=True):
        yield pid_path


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

class TestHelp:
    def test_no_args_shows_help(self):
        result = runner.invoke(app, [])
        assert "Run a command as a daemon" in result.output

    def test_help_flag(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("run", "stop", "reload", "status", "config"):
            assert command in result.output


class TestRun:
    @patch("sigdaemon.cli.configure_logging")
    @patch("sigdaemon.cli.run_daemon")
    def test_exit_code_from_workload(self, mock_run, mock_logging, config_path):
        mock_run.return_value = DaemonResult(success=True, exit_code=3)

        result = runner.invoke(
            app, ["run", "--config", str(config_path), "-f", "--", "sleep", "10"]
        )

        assert result.exit_code == 3
        supervisor = mock_run.call_args[0][0]
        assert isinstance(supervisor, CommandSupervisor)
        assert supervisor._command == ["sleep", "10"]
        assert mock_run.call_args[1] == {"foreground": True}
        mock_logging.assert_called_once()

    @patch("sigdaemon.cli.configure_logging")
    @patch("sigdaemon.cli.run_daemon")
    def test_detaches_by_default(self, mock_run, mock_logging, config_path):
        mock_run.return_value = DaemonResult(success=True, exit_code=0)

        result = runner.invoke(app, ["run", "--config", str(config_path), "--", "sleep", "10"])

        assert result.exit_code == 0
        assert mock_run.call_args[1] == {"foreground": False}

    @patch("sigdaemon.cli.configure_logging")
    @patch("sigdaemon.cli.run_daemon")
    def test_setup_error_reported(self, mock_run, mock_logging, config_path):
        mock_run.return_value = DaemonResult(
            success=False, exit_code=1, error=SetupError("fork() failed", errno.EAGAIN)
        )

        result = runner.invoke(app, ["run", "--config", str(config_path), "--", "true"])

        assert result.exit_code == 1
        assert "fork() failed" in result.output

    @patch("sigdaemon.cli.configure_logging")
    @patch("sigdaemon.cli.run_daemon")
    def test_refuses_when_already_running(self, mock_run, mock_logging, config_path, live_pid_file):
        result = runner.invoke(
            app,
            ["run", "--config", str(config_path), "--pid-file", str(live_pid_file), "--", "true"],
        )

        assert result.exit_code == 1
        assert "already running" in result.output
        mock_run.assert_not_called()

    @patch("sigdaemon.cli.configure_logging")
    @patch("sigdaemon.cli.run_daemon")
    def test_pid_file_option_overrides_config(self, mock_run, mock_logging, config_path, tmp_path):
        mock_run.return_value = DaemonResult(success=True, exit_code=0)
        pid_path = tmp_path / "override.pid"

        runner.invoke(
            app,
            ["run", "--config", str(config_path), "--pid-file", str(pid_path), "--", "true"],
        )

        supervisor = mock_run.call_args[0][0]
        assert supervisor.config.pid_file == str(pid_path)


class TestSignalCommands:
    @pytest.mark.parametrize(
        "command, signum",
        [("stop", signal.SIGTERM), ("reload", signal.SIGHUP)],
    )
    def test_sends_signal_to_daemon(self, command, signum, config_path, live_pid_file):
        with patch("sigdaemon.cli.os.kill") as mock_kill:
            result = runner.invoke(
                app, [command, "--config", str(config_path), "--pid-file", str(live_pid_file)]
            )

        assert result.exit_code == 0
        mock_kill.assert_called_once_with(4242, signum)
        assert "4242" in result.output

    def test_not_running(self, config_path, tmp_path):
        with patch("sigdaemon.cli.os.kill") as mock_kill:
            result = runner.invoke(
                app, ["stop", "--config", str(config_path), "--pid-file", str(tmp_path / "none.pid")]
            )

        assert result.exit_code == 1
        assert "not running" in result.output
        mock_kill.assert_not_called()

    def test_requires_pid_file(self, config_path):
        result = runner.invoke(app, ["reload", "--config", str(config_path)])

        assert result.exit_code == 1
        assert "no PID file configured" in result.output


class TestStatus:
    def test_running(self, config_path, live_pid_file):
        result = runner.invoke(
            app, ["status", "--config", str(config_path), "--pid-file", str(live_pid_file)]
        )

        assert result.exit_code == 0
        assert "running" in result.output
        assert "4242" in result.output

    def test_stopped(self, config_path, tmp_path):
        result = runner.invoke(
            app, ["status", "--config", str(config_path), "--pid-file", str(tmp_path / "x.pid")]
        )

        assert result.exit_code == 1
        assert "stopped" in result.output


class TestConfig:
    def test_shows_settings(self, config_path):
        config_path.write_text("pid_file: /var/run/app.pid\n")

        result = runner.invoke(app, ["config", "--config", str(config_path)])

        assert result.exit_code == 0
        assert "supervisor.stop_signal" in result.output
        assert "SIGTERM" in result.output
        assert "/var/run/app.pid" in result.output

    def test_broken_config_file(self, config_path):
        config_path.write_text("- not\n- a mapping\n")

        result = runner.invoke(app, ["config", "--config", str(config_path)])

        assert result.exit_code == 1
        assert "expected a mapping" in result.output
