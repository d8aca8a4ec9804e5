# sigdaemon/background/channel.py
"""
Self-pipe channel between the signal relay and the dispatch thread.

The write end is the interpreter's signal wakeup fd (and is written once
more for the shutdown sentinel); the read end is drained by the dispatch
thread. Each identifier travels as a single byte.
"""

import logging
import os

from sigdaemon.errors import SetupError

logger = logging.getLogger(__name__)

# Never a real signal number: asks the dispatch loop to exit.
SENTINEL = 0


class SignalChannel:
    """
    OS pipe carrying signal identifiers, in delivery order.

    Multi-producer (any handler invocation) / single-consumer (the dispatch
    thread). Reads block until an identifier is available.
    """

    def __init__(self, read_fd: int, write_fd: int) -> None:
        self.read_fd = read_fd
        self.write_fd = write_fd
        self._closed = False

    @classmethod
    def open(cls) -> "SignalChannel":
        """
        Create a fresh pipe.

        Raises:
            SetupError: If pipe() fails
        """
        try:
            read_fd, write_fd = os.pipe()
            # set_wakeup_fd() only accepts a non-blocking descriptor
            os.set_blocking(write_fd, False)
        except OSError as e:
            raise SetupError.from_os_error("pipe() failed", e) from e

        logger.debug(f"Opened signal channel (read_fd={read_fd}, write_fd={write_fd})")
        return cls(read_fd, write_fd)

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, identifier: int) -> None:
        """
        Write one identifier.

        A failed write aborts the process: losing a stop or reconfigure
        request is not recoverable.
        """
        try:
            os.write(self.write_fd, bytes((identifier,)))
        except OSError:
            os.abort()

    def receive(self) -> int | None:
        """
        Block until one identifier is available.

        Returns:
            The identifier, or None once every write end is closed
        """
        data = os.read(self.read_fd, 1)
        if not data:
            return None
        return data[0]

    def close(self) -> None:
        """Close both ends. Idempotent."""
        if self._closed:
            return
        self._closed = True
        os.close(self.read_fd)
        os.close(self.write_fd)
        logger.debug("Closed signal channel")
