# sigdaemon/config/schema.py
"""
Pydantic configuration models for sigdaemon.

All models use extra="ignore" to allow unknown YAML keys without crashing.
"""

import signal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LoggingConfig(BaseModel):
    """Log output configuration."""

    model_config = ConfigDict(extra="ignore")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Root logger level"
    )
    format: Literal["json", "text"] = Field(
        default="json", description="JSON lines or human-readable text"
    )
    file: str | None = Field(
        default=None,
        description="Log file path (None = stderr, which is /dev/null once detached)",
    )


class SupervisorConfig(BaseModel):
    """How the supervised command is signalled."""

    model_config = ConfigDict(extra="ignore")

    stop_signal: str = Field(
        default="SIGTERM", description="Signal sent to the command on stop"
    )
    reload_signal: str = Field(
        default="SIGHUP", description="Signal sent to the command on reconfigure"
    )
    forward_reload: bool = Field(
        default=True, description="Forward reconfigure requests to the command"
    )

    @field_validator("stop_signal", "reload_signal")
    @classmethod
    def _known_signal(cls, value: str) -> str:
        name = value.upper()
        if not name.startswith("SIG"):
            name = f"SIG{name}"
        if name not in signal.Signals.__members__:
            raise ValueError(f"unknown signal: {value}")
        return name


class DaemonConfig(BaseModel):
    """Root configuration for sigdaemon."""

    model_config = ConfigDict(extra="ignore")

    foreground: bool = Field(
        default=False, description="Stay attached to the terminal"
    )
    pid_file: str | None = Field(
        default=None, description="PID file path (None = no PID file)"
    )
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    supervisor: SupervisorConfig = Field(default_factory=SupervisorConfig)
