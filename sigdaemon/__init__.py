"""
sigdaemon: signal-safe daemon lifecycle control.

Runs a caller-supplied workload as a (optionally detached) daemon and turns
SIGHUP/SIGINT/SIGTERM into ordinary reconfigure()/stop() calls on a
dedicated thread.
"""

from sigdaemon.background.lifecycle import current_state, run_daemon
from sigdaemon.errors import (
    ConfigError,
    DaemonAlreadyRunning,
    LifecycleActiveError,
    SetupError,
    SigdaemonError,
)
from sigdaemon.models import DaemonCallbacks, DaemonResult, DetachResult, LifecycleState

__version__ = "0.1.0"

__all__ = [
    "run_daemon",
    "current_state",
    "DaemonCallbacks",
    "DaemonResult",
    "DetachResult",
    "LifecycleState",
    "SigdaemonError",
    "SetupError",
    "ConfigError",
    "LifecycleActiveError",
    "DaemonAlreadyRunning",
]
