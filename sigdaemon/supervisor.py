# sigdaemon/supervisor.py
"""
Command supervisor: runs a child command as the daemon workload.

start() spawns the command and waits for it; stop() and reconfigure()
arrive on the dispatch thread and are forwarded to the child as signals.
"""

import logging
import signal
import subprocess
import threading
from pathlib import Path

from sigdaemon.config.loader import load_config
from sigdaemon.config.schema import DaemonConfig
from sigdaemon.errors import ConfigError
from sigdaemon.logging_config import configure_logging
from sigdaemon.models.callbacks import DaemonCallbacks
from sigdaemon.pidfile import PidFile

logger = logging.getLogger(__name__)


def exit_code_for(returncode: int) -> int:
    """Map a Popen returncode to a shell-style exit status (128+N for signal N)."""
    if returncode < 0:
        return 128 - returncode
    return returncode


class CommandSupervisor(DaemonCallbacks):
    """
    DaemonCallbacks implementation supervising one child process.

    Features:
        - Writes/removes the PID file around the child's lifetime
        - stop() sends the configured stop signal (repeats are harmless)
        - stop() before the child exists prevents it from being spawned
        - reconfigure() reloads the config file, reapplies logging and
          optionally forwards the reload signal
    """

    def __init__(
        self,
        command: list[str],
        config: DaemonConfig | None = None,
        config_path: Path | None = None,
    ) -> None:
        """
        Initialize supervisor.

        Args:
            command: argv of the command to run
            config: Effective configuration (None = defaults)
            config_path: Config file reloaded on reconfigure (None = keep config)
        """
        if not command:
            raise ValueError("command must not be empty")
        self._command = list(command)
        self._config = config or DaemonConfig()
        self._config_path = config_path
        self._lock = threading.Lock()
        self._process: subprocess.Popen | None = None
        self._stop_requested = False

    @property
    def config(self) -> DaemonConfig:
        return self._config

    @property
    def process(self) -> subprocess.Popen | None:
        """The running child (None before start or when never spawned)."""
        return self._process

    @property
    def stop_requested(self) -> bool:
        return self._stop_requested

    def start(self, foreground: bool) -> int:
        pid_file = PidFile(self._config.pid_file) if self._config.pid_file else None
        if pid_file is not None:
            pid_file.write()

        try:
            with self._lock:
                if self._stop_requested:
                    logger.info("Stop requested before start, not spawning command")
                    return 0
                self._process = subprocess.Popen(self._command)

            logger.info(
                f"Started {self._command[0]} (pid {self._process.pid}, foreground={foreground})"
            )
            returncode = self._process.wait()
            logger.info(f"{self._command[0]} exited with returncode {returncode}")
            return exit_code_for(returncode)
        finally:
            if pid_file is not None:
                pid_file.remove()

    def stop(self) -> None:
        with self._lock:
            self._stop_requested = True
            self._send(self._config.supervisor.stop_signal)

    def reconfigure(self) -> None:
        if self._config_path is not None:
            self._reload_config()

        if self._config.supervisor.forward_reload:
            with self._lock:
                self._send(self._config.supervisor.reload_signal)

    def _reload_config(self) -> None:
        try:
            config = load_config(self._config_path)
        except ConfigError as e:
            logger.error(f"Reload failed, keeping current config: {e}")
            return

        # pid_file and foreground only matter at startup
        self._config = config.model_copy(
            update={"pid_file": self._config.pid_file, "foreground": self._config.foreground}
        )
        configure_logging(self._config.logging)
        logger.info(f"Reloaded config from {self._config_path}")

    def _send(self, signal_name: str) -> None:
        # Caller holds self._lock
        process = self._process
        if process is None or process.poll() is not None:
            return
        process.send_signal(signal.Signals[signal_name])
        logger.info(f"Sent {signal_name} to pid {process.pid}")
