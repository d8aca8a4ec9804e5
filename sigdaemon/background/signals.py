# sigdaemon/background/signals.py
"""
Signal relay: forwards delivered signals into the signal channel.

The write happens inside the interpreter's C-level handler through
signal.set_wakeup_fd(): one byte per delivery, in arrival order, even
while the main thread is busy inside C code. The Python-level handler we
install is a no-op whose only job is to keep the disposition caught.
Stop/reconfigure logic runs later on the dispatch thread, so application
code never executes in handler context.
"""

import errno
import logging
import signal
import sys
from dataclasses import dataclass
from typing import Any, Callable

from sigdaemon.background.channel import SignalChannel
from sigdaemon.errors import SetupError, fatal

logger = logging.getLogger(__name__)

# Installation order; SIGHUP is absent on some platforms.
RELAYED_SIGNALS: tuple[signal.Signals, ...] = tuple(
    getattr(signal, name)
    for name in ("SIGINT", "SIGTERM", "SIGHUP")
    if hasattr(signal, name)
)

# Part of the unraisable message CPython reports for a failed wakeup write
_WAKEUP_WRITE_ERROR = "signal wakeup fd"


@dataclass(frozen=True)
class WakeupBinding:
    """What attach_channel() replaced, for detach_channel()."""

    previous_fd: int
    previous_hook: Callable[[Any], None]


def _relay_signal(signum: int, frame: Any) -> None:
    # The byte was already written by the C handler
    pass


def attach_channel(channel: SignalChannel) -> WakeupBinding:
    """
    Make the channel's write end the interpreter's signal wakeup fd.

    Every signal caught by a Python-level handler is then written to the
    channel as one byte from the C handler itself. A failed write is
    reported by CPython as an unraisable OSError; the hook installed here
    turns that into a process abort.

    Args:
        channel: Open channel; its write end must be non-blocking

    Returns:
        WakeupBinding to pass to detach_channel()

    Raises:
        SetupError: If the interpreter refuses the fd (e.g. a call from a
            non-main thread or a blocking descriptor)
    """
    try:
        previous_fd = signal.set_wakeup_fd(channel.write_fd, warn_on_full_buffer=True)
    except ValueError as e:
        raise SetupError(f"set_wakeup_fd() failed: {e}", errno.EINVAL) from e

    previous_hook = sys.unraisablehook

    def _abort_on_wakeup_failure(unraisable: Any) -> None:
        if _WAKEUP_WRITE_ERROR in (unraisable.err_msg or ""):
            fatal(f"Lost a signal: write to channel failed ({unraisable.exc_value})")
        previous_hook(unraisable)

    sys.unraisablehook = _abort_on_wakeup_failure
    logger.debug(f"Signal wakeup fd set to {channel.write_fd} (was {previous_fd})")
    return WakeupBinding(previous_fd=previous_fd, previous_hook=previous_hook)


def detach_channel(binding: WakeupBinding) -> None:
    """Reinstate the wakeup fd and unraisable hook replaced by attach_channel()."""
    signal.set_wakeup_fd(binding.previous_fd)
    sys.unraisablehook = binding.previous_hook
    logger.debug(f"Signal wakeup fd restored to {binding.previous_fd}")


def install_relay(signum: int) -> Any:
    """
    Catch a signal so that its deliveries reach the channel.

    Args:
        signum: Signal number to relay

    Returns:
        The previous handler, for restore_handlers()

    Raises:
        SetupError: If the OS (or interpreter) refuses the handler, e.g. an
            invalid signal number or a call from a non-main thread
    """
    reason = f"signal() failed for {signum}"
    try:
        previous = signal.signal(signum, _relay_signal)
    except OSError as e:
        raise SetupError.from_os_error(reason, e) from e
    except ValueError as e:
        raise SetupError(f"{reason}: {e}", errno.EINVAL) from e

    logger.debug(f"Relaying signal {signum}")
    return previous


def restore_handlers(previous: dict[int, Any]) -> None:
    """
    Reinstate handlers saved by install_relay(), newest first.

    Args:
        previous: Signal number -> handler returned by install_relay()
    """
    for signum, handler in reversed(list(previous.items())):
        # None means the old handler was not installed from Python
        signal.signal(signum, signal.SIG_DFL if handler is None else handler)
        logger.debug(f"Restored handler for signal {signum}")
