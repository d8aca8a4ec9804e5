# sigdaemon/errors.py
"""
Exception types and the process-abort helper.

Setup failures are reported to the caller; relay failures and contract
violations end the process via fatal().
"""

import errno
import logging
import os
from typing import NoReturn

logger = logging.getLogger(__name__)


class SigdaemonError(Exception):
    """Base class for sigdaemon errors."""


class SetupError(SigdaemonError):
    """
    An OS primitive failed before the workload started.

    Attributes:
        code: Originating OS error code (errno)
        reason: Short description of the failed call (e.g. "pipe() failed")
    """

    def __init__(self, reason: str, code: int) -> None:
        self.reason = reason
        self.code = code
        super().__init__(f"{reason} ({code}): {os.strerror(code)}")

    @classmethod
    def from_os_error(cls, reason: str, exc: OSError) -> "SetupError":
        """Build a SetupError from a caught OSError, keeping its errno (EIO if it has none)."""
        return cls(reason, exc.errno or errno.EIO)


class ConfigError(SigdaemonError):
    """Raised when the config file cannot be parsed or validated."""


class LifecycleActiveError(SigdaemonError):
    """Raised when run_daemon() is entered while another invocation is active."""


class DaemonAlreadyRunning(SigdaemonError):
    """Raised when another daemon instance already owns the PID file."""


def fatal(message: str) -> NoReturn:
    """Log a critical message and abort the process."""
    logger.critical(message)
    os.abort()
