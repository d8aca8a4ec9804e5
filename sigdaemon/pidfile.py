# sigdaemon/pidfile.py
"""
PID file bookkeeping for daemonized runs.

The file holds the daemon's pid. A file whose pid is no longer alive is
stale and gets overwritten.
"""

import logging
import os
from pathlib import Path

import psutil

from sigdaemon.errors import DaemonAlreadyRunning

logger = logging.getLogger(__name__)


class PidFile:
    """PID file at a fixed path."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)

    def read(self) -> int | None:
        """Return the recorded pid, or None if missing or unparsable."""
        try:
            return int(self.path.read_text().strip())
        except (OSError, ValueError):
            return None

    def running_pid(self) -> int | None:
        """Return the recorded pid if that process is alive."""
        pid = self.read()
        if pid is None or not psutil.pid_exists(pid):
            return None
        return pid

    def check(self) -> None:
        """
        Ensure no other live process owns the file.

        Raises:
            DaemonAlreadyRunning: If the recorded pid is alive and not us
        """
        pid = self.running_pid()
        if pid is not None and pid != os.getpid():
            raise DaemonAlreadyRunning(f"Daemon already running with PID {pid}")

    def write(self) -> None:
        """Record the current pid (call after detaching; the pid changes)."""
        self.check()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(f"{os.getpid()}\n")
        logger.info(f"Wrote PID file {self.path} (pid {os.getpid()})")

    def remove(self) -> None:
        """Remove the file if it still records the current pid."""
        if self.read() == os.getpid():
            self.path.unlink(missing_ok=True)
            logger.info(f"Removed PID file {self.path}")
