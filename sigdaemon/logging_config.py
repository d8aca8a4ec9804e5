# sigdaemon/logging_config.py
"""
Logging configuration: JSON or text records to stderr or a log file.

Once detached, stderr points at /dev/null, so daemonized runs should log to
a file. File handlers reopen the file when it is rotated away.
"""

import json
import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from typing import Any

from sigdaemon.config.schema import LoggingConfig

TEXT_FORMAT = "%(asctime)s  %(levelname)-7s  %(name)s  %(message)s"

# Handler installed by the last configure_logging() call
_installed: logging.Handler | None = None


class JsonFormatter(logging.Formatter):
    """Formats log records as JSON for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON line."""
        log_data: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "thread": record.threadName,
            "msg": record.getMessage(),
        }

        if record.exc_info:
            log_data["exc"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def configure_logging(config: LoggingConfig | None = None) -> logging.Handler:
    """
    Configure the root logger with a single handler.

    Clears existing handlers, so calling it again (e.g. on reconfigure)
    replaces the previous setup and reopens the log file.

    Args:
        config: Logging settings (None = defaults)

    Returns:
        The installed handler
    """
    global _installed

    config = config or LoggingConfig()

    if config.file:
        handler: logging.Handler = logging.handlers.WatchedFileHandler(config.file)
    else:
        handler = logging.StreamHandler(sys.stderr)

    if config.format == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    root = logging.getLogger()
    root.handlers.clear()
    if _installed is not None:
        _installed.close()
    root.addHandler(handler)
    root.setLevel(config.level)
    _installed = handler

    return handler
