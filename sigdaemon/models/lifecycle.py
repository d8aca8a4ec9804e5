# sigdaemon/models/lifecycle.py
"""Lifecycle states and result types for run_daemon()."""

from dataclasses import dataclass
from enum import Enum

from sigdaemon.errors import SetupError


class LifecycleState(Enum):
    """Orchestrator phases."""

    INIT = "init"
    DAEMONIZING = "daemonizing"
    INSTALLING_SIGNALS = "installing_signals"
    RUNNING = "running"
    TEARING_DOWN = "tearing_down"
    TERMINATED = "terminated"
    FAILED_SETUP = "failed_setup"


class DetachResult(Enum):
    """Outcome of detach_process(), independent of platform."""

    PARENT = "parent"  # original process, its job is done
    CHILD = "child"  # detached daemon process, continue startup
    UNSUPPORTED = "unsupported"  # platform cannot detach


@dataclass(frozen=True)
class DaemonResult:
    """
    Outcome of one run_daemon() invocation.

    success is False only for setup errors, in which case error is set and
    the workload never started.
    """

    success: bool
    exit_code: int
    error: SetupError | None = None
