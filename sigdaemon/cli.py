# sigdaemon/cli.py
"""
CLI interface for sigdaemon.

Thin presentation layer: `run` wraps a command in CommandSupervisor and
hands it to run_daemon(); the other commands talk to a running daemon
through its PID file.
"""

import os
import signal
from pathlib import Path

import typer

from sigdaemon.background.lifecycle import run_daemon
from sigdaemon.config.loader import get_config_path, load_config
from sigdaemon.config.schema import DaemonConfig
from sigdaemon.errors import ConfigError, DaemonAlreadyRunning
from sigdaemon.logging_config import configure_logging
from sigdaemon.pidfile import PidFile
from sigdaemon.supervisor import CommandSupervisor

app = typer.Typer(
    name="sigdaemon",
    help="Run a command as a daemon with signal-safe stop and reload handling.",
    no_args_is_help=True,
)

_CONFIG_OPTION = typer.Option(None, "--config", "-c", help="Config file (default: user config dir)")
_PID_FILE_OPTION = typer.Option(None, "--pid-file", "-p", help="PID file path (overrides config)")


def _load(config_path: Path | None, pid_file: Path | None) -> DaemonConfig:
    """Load config and apply CLI overrides."""
    try:
        config = load_config(config_path)
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    if pid_file is not None:
        config = config.model_copy(update={"pid_file": str(pid_file)})
    return config


def _require_pid_file(config: DaemonConfig) -> PidFile:
    if not config.pid_file:
        typer.echo("Error: no PID file configured (use --pid-file)", err=True)
        raise typer.Exit(1)
    return PidFile(config.pid_file)


@app.command(
    "run",
    context_settings={"allow_interspersed_args": False},
)
def run_command(
    command: list[str] = typer.Argument(..., help="Command and arguments to supervise"),
    foreground: bool = typer.Option(False, "--foreground", "-f", help="Do not detach from the terminal"),
    config_path: Path | None = _CONFIG_OPTION,
    pid_file: Path | None = _PID_FILE_OPTION,
):
    """Run COMMAND as a daemon. SIGTERM/SIGINT stop it, SIGHUP reloads."""
    config = _load(config_path, pid_file)
    if foreground:
        config = config.model_copy(update={"foreground": True})

    configure_logging(config.logging)

    if config.pid_file:
        try:
            PidFile(config.pid_file).check()
        except DaemonAlreadyRunning as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1)

    supervisor = CommandSupervisor(
        command,
        config=config,
        config_path=config_path or get_config_path(),
    )
    result = run_daemon(supervisor, foreground=config.foreground)

    if not result.success:
        typer.echo(f"Error: {result.error}", err=True)
    raise typer.Exit(result.exit_code)


def _signal_daemon(config: DaemonConfig, signum: signal.Signals) -> int:
    pid_file = _require_pid_file(config)
    pid = pid_file.running_pid()
    if pid is None:
        typer.echo("Daemon is not running.", err=True)
        raise typer.Exit(1)
    os.kill(pid, signum)
    return pid


@app.command()
def stop(
    config_path: Path | None = _CONFIG_OPTION,
    pid_file: Path | None = _PID_FILE_OPTION,
):
    """Ask the running daemon to stop (SIGTERM)."""
    pid = _signal_daemon(_load(config_path, pid_file), signal.SIGTERM)
    typer.echo(f"Sent SIGTERM to {pid}.")


@app.command()
def reload(
    config_path: Path | None = _CONFIG_OPTION,
    pid_file: Path | None = _PID_FILE_OPTION,
):
    """Ask the running daemon to reload its configuration (SIGHUP)."""
    pid = _signal_daemon(_load(config_path, pid_file), signal.SIGHUP)
    typer.echo(f"Sent SIGHUP to {pid}.")


@app.command()
def status(
    config_path: Path | None = _CONFIG_OPTION,
    pid_file: Path | None = _PID_FILE_OPTION,
):
    """Show whether the daemon is running."""
    pid = _require_pid_file(_load(config_path, pid_file)).running_pid()
    if pid is None:
        typer.echo(typer.style("State:    stopped", fg=typer.colors.RED))
        raise typer.Exit(1)
    typer.echo(typer.style("State:    running", fg=typer.colors.GREEN))
    typer.echo(f"PID:      {pid}")


@app.command("config")
def show_config(config_path: Path | None = _CONFIG_OPTION):
    """Show the config file location and effective settings."""
    from rich.console import Console
    from rich.table import Table

    path = config_path or get_config_path()
    config = _load(path, None)

    table = Table(title=str(path), show_header=True)
    table.add_column("Setting")
    table.add_column("Value")
    table.add_row("foreground", str(config.foreground))
    table.add_row("pid_file", str(config.pid_file))
    for section in ("logging", "supervisor"):
        for key, value in getattr(config, section).model_dump().items():
            table.add_row(f"{section}.{key}", str(value))

    Console().print(table)


if __name__ == "__main__":
    app()
