"""Configuration system for sigdaemon."""

from .loader import get_config_path, load_config
from .schema import DaemonConfig, LoggingConfig, SupervisorConfig

__all__ = [
    "DaemonConfig",
    "LoggingConfig",
    "SupervisorConfig",
    "load_config",
    "get_config_path",
]
