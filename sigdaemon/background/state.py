# sigdaemon/background/state.py
"""
Process-wide lifecycle state.

The signal wakeup fd and handlers are process-wide, so the callbacks and
the channel they feed are recorded here too, in one explicit singleton.
Its scope is a single run_daemon() invocation: claim() at entry, release()
before returning. A second claim while one is held is a contract violation.
"""

import logging
import threading

from sigdaemon.background.channel import SignalChannel
from sigdaemon.errors import LifecycleActiveError
from sigdaemon.models.callbacks import DaemonCallbacks
from sigdaemon.models.lifecycle import LifecycleState

logger = logging.getLogger(__name__)


class ProcessLifecycle:
    """Singleton record of the active daemon lifecycle."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self.callbacks: DaemonCallbacks | None = None
        self.channel: SignalChannel | None = None
        self.phase = LifecycleState.INIT

    @property
    def active(self) -> bool:
        """True while a run_daemon() invocation holds the state."""
        return self._guard.locked()

    def claim(self, callbacks: DaemonCallbacks) -> None:
        """
        Take ownership for one invocation.

        Raises:
            LifecycleActiveError: If another invocation is active
        """
        if not self._guard.acquire(blocking=False):
            raise LifecycleActiveError(
                f"run_daemon() is already active (phase={self.phase.value})"
            )
        self.callbacks = callbacks
        self.channel = None
        self.phase = LifecycleState.INIT

    def transition(self, phase: LifecycleState) -> None:
        logger.debug(f"Lifecycle {self.phase.value} -> {phase.value}")
        self.phase = phase

    def release(self) -> None:
        """Drop references and allow the next invocation."""
        self.callbacks = None
        self.channel = None
        self._guard.release()


lifecycle_state = ProcessLifecycle()
