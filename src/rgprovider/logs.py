"""Logging setup for the provider.

Audit mode emits one JSON object per record on stdout, including any
fields passed via ``extra=``. Otherwise a plain human-readable format
is used.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime

from .config import Config

# Attributes every LogRecord carries; anything else came from extra=
_RESERVED_ATTRS = frozenset(
    (
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "exc_info",
        "exc_text",
        "thread",
        "threadName",
        "taskName",
        "message",
    )
)

PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    """Format logs as JSON for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(UTC).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }

        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS:
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def setup_logging(config: Config) -> logging.Handler:
    """Install a stdout handler on the root logger.

    Args:
        config: Provider configuration; selects level and format.

    Returns:
        The installed handler, so callers can remove it again.
    """
    handler = logging.StreamHandler(sys.stdout)
    if config.enable_audit_logging:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT))

    root_logger = logging.getLogger()
    root_logger.addHandler(handler)
    root_logger.setLevel(config.log_level.upper())

    # Reduce noise from HTTP client libraries used by adapters
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    return handler
