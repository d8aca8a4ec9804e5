# sigdaemon/background/dispatcher.py
"""
Dispatch thread: turns queued signal identifiers into callback calls.

Reads one identifier at a time from the signal channel and invokes the
matching callback synchronously, so stop() and reconfigure() never run
concurrently with each other. Callbacks only fire between
begin_dispatch() and end_dispatch(); identifiers read before that are
held, identifiers read after it are dropped.
"""

import errno
import logging
import signal
import threading

from sigdaemon.background.channel import SENTINEL, SignalChannel
from sigdaemon.errors import SetupError, fatal
from sigdaemon.models.callbacks import DaemonCallbacks

logger = logging.getLogger(__name__)

# Signal name -> DaemonCallbacks method
_ACTIONS = {
    "SIGHUP": "reconfigure",
    "SIGINT": "stop",
    "SIGTERM": "stop",
}


class DispatchThread:
    """
    Single-purpose thread draining a SignalChannel.

    Features:
        - HUP -> reconfigure(), INT/TERM -> stop()
        - Sentinel (0) or end-of-file ends the loop
        - Other real signals (caught by handlers we did not install) are skipped
        - Any other identifier is a contract violation and aborts
        - Callbacks fire only inside the begin_dispatch()/end_dispatch() window
        - Callback exceptions are logged; the loop keeps running
    """

    def __init__(self, channel: SignalChannel, callbacks: DaemonCallbacks) -> None:
        """
        Initialize dispatch thread (not started).

        Args:
            channel: Channel to read identifiers from
            callbacks: Workload receiving stop/reconfigure calls
        """
        self._channel = channel
        self._callbacks = callbacks
        self._thread: threading.Thread | None = None
        self._released = threading.Event()
        self._gate = threading.Lock()
        self._dispatching = False

    @property
    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def ident(self) -> int | None:
        """Thread identifier once started."""
        return self._thread.ident if self._thread else None

    def start(self) -> None:
        """
        Start the dispatch loop.

        Raises:
            SetupError: If the thread cannot be created
        """
        thread = threading.Thread(
            target=self._run_loop, name="sigdaemon-dispatch", daemon=True
        )
        try:
            thread.start()
        except RuntimeError as e:
            raise SetupError(f"thread start failed: {e}", errno.EAGAIN) from e
        self._thread = thread

    def begin_dispatch(self) -> None:
        """Start firing callbacks, including for identifiers already queued."""
        with self._gate:
            self._dispatching = True
        self._released.set()

    def end_dispatch(self) -> None:
        """Stop firing callbacks. Returns once an in-flight callback has finished."""
        with self._gate:
            self._dispatching = False

    def stop(self) -> None:
        """Send the sentinel and wait for the loop to exit. No timeout."""
        if self._thread is None:
            return
        self.end_dispatch()
        self._released.set()
        self._channel.send(SENTINEL)
        self._thread.join()
        self._thread = None
        logger.debug("Dispatch thread joined")

    def _run_loop(self) -> None:
        logger.debug("Dispatch loop started")
        while True:
            identifier = self._channel.receive()
            if identifier is None or identifier == SENTINEL:
                break

            resolved = self._resolve(identifier)
            if resolved is None:
                continue

            self._released.wait()
            with self._gate:
                if not self._dispatching:
                    logger.debug(f"Dropping {resolved[0]}: not running")
                    continue
                self._dispatch(*resolved)
        logger.debug("Dispatch loop exited")

    def _resolve(self, identifier: int) -> tuple[str, str] | None:
        if not 0 < identifier < signal.NSIG:
            fatal(f"Unexpected identifier {identifier} on signal channel")
        try:
            name = signal.Signals(identifier).name
        except ValueError:
            # Real-time signals between SIGRTMIN and SIGRTMAX have no member
            name = f"signal {identifier}"

        action = _ACTIONS.get(name)
        if action is None:
            # Wakeup byte for a signal someone else caught from Python
            logger.debug(f"Ignoring {name}: not relayed")
        return (name, action) if action else None

    def _dispatch(self, name: str, action: str) -> None:
        logger.info(f"Received {name}, calling {action}()")
        try:
            getattr(self._callbacks, action)()
        except Exception:
            logger.exception(f"{action}() raised while handling {name}")
