"""Data models shared by the lifecycle core and its embedders."""

from .callbacks import DaemonCallbacks
from .lifecycle import DaemonResult, DetachResult, LifecycleState

__all__ = [
    "DaemonCallbacks",
    "DaemonResult",
    "DetachResult",
    "LifecycleState",
]
