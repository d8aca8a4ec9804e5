# sigdaemon/models/callbacks.py
"""
Callback interface implemented by the embedding application.

The implementing instance is the daemon's context: whatever state start()
and stop() share lives on it.
"""

from abc import ABC, abstractmethod


class DaemonCallbacks(ABC):
    """
    Abstract base class for daemon workloads.

    start() runs on the thread that called run_daemon(). stop() and
    reconfigure() run on the signal dispatch thread, one at a time, and may
    overlap with start().
    """

    @abstractmethod
    def start(self, foreground: bool) -> int:
        """
        Run the workload until it decides to terminate.

        Called exactly once. Expected to block for the daemon's lifetime and
        return once a prior stop() has been observed through the workload's
        own state.

        Args:
            foreground: True when the process is still attached to its terminal

        Returns:
            Process exit code
        """
        pass

    @abstractmethod
    def stop(self) -> None:
        """
        Request termination (INT or TERM received).

        May be called zero or more times; must be safe to repeat.
        """
        pass

    @abstractmethod
    def reconfigure(self) -> None:
        """
        Reload configuration (HUP received).

        May be called zero or more times.
        """
        pass
