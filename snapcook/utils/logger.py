"""Logging for SnapCook.

Environment variables:
- LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
- LOG_TYPE: text (rich console output) or json (one object per line) (default: text)

Pipeline code attaches request context with `extra=`; the JSON output keeps
the fields listed in CONTEXT_FIELDS.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone

from rich.logging import RichHandler

CONTEXT_FIELDS = ("outcome", "image_quality", "model_state")


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update({field: getattr(record, field) for field in CONTEXT_FIELDS if hasattr(record, field)})

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def _resolve_level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def _build_handler(log_type: str) -> logging.Handler:
    if log_type == "json":
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter())
        return handler
    return RichHandler(show_path=False, markup=False, rich_tracebacks=True, log_time_format="[%Y-%m-%d %H:%M:%S]")


def get_logger(name: str) -> logging.Logger:
    """Return the named logger, attaching a handler on first use only.

    Args:
        name: Logger name, typically the package or module name.
    """
    logger_instance = logging.getLogger(name)
    if logger_instance.handlers:
        return logger_instance

    level = _resolve_level(os.getenv("LOG_LEVEL", "INFO"))
    handler = _build_handler(os.getenv("LOG_TYPE", "text").lower())
    handler.setLevel(level)

    logger_instance.setLevel(level)
    logger_instance.addHandler(handler)
    return logger_instance


logger = get_logger("snapcook")

# Pillow logs every plugin it tries at DEBUG
logging.getLogger("PIL").setLevel(logging.WARNING)
