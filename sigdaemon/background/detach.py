# sigdaemon/background/detach.py
"""
Daemonization: detach the process from its terminal and session.

Modelled on glibc's daemon(): fork, let the parent go, make the child a
session leader and point its stdio at the null device. The working
directory is left unchanged on purpose so relative paths used by the
workload keep resolving against the caller's cwd.

Must run before any thread is started; fork() only copies the calling
thread.
"""

import logging
import os
import sys

from sigdaemon.errors import SetupError
from sigdaemon.models.lifecycle import DetachResult

logger = logging.getLogger(__name__)

_STDIO_FDS = (0, 1, 2)


def detach_process() -> DetachResult:
    """
    Detach from the controlling terminal.

    Returns:
        DetachResult.PARENT in the original process (it should exit),
        DetachResult.CHILD in the detached process,
        DetachResult.UNSUPPORTED where the platform has no fork()

    Raises:
        SetupError: If fork() or setsid() fails
    """
    if not hasattr(os, "fork"):
        logger.warning("Detaching is not supported on this platform")
        return DetachResult.UNSUPPORTED

    # Buffered output would otherwise be written twice
    sys.stdout.flush()
    sys.stderr.flush()

    try:
        pid = os.fork()
    except OSError as e:
        raise SetupError.from_os_error("fork() failed", e) from e

    if pid != 0:
        logger.info(f"Detached daemon process {pid}")
        return DetachResult.PARENT

    try:
        os.setsid()
    except OSError as e:
        raise SetupError.from_os_error("setsid() failed", e) from e

    _redirect_stdio()
    return DetachResult.CHILD


def _redirect_stdio() -> None:
    fd = os.open(os.devnull, os.O_RDWR)
    for target in _STDIO_FDS:
        os.dup2(fd, target)
    if fd not in _STDIO_FDS:
        os.close(fd)
