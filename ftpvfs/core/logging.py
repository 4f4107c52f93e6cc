"""Logging configuration for the ftpvfs package."""

from __future__ import annotations

import json
import logging
import sys

LOGGER_NAME = "ftpvfs"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(session_id)s] %(name)s :: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
SUPPORTED_FORMATS = {"json", "text"}

_EXTRA_KEYS = (
    "raw_path",
    "resolved_path",
    "cwd",
    "from_path",
    "to_path",
    "capacity",
    "limit_to_cwd",
    "error_type",
    "session_count",
)


class SessionContextFilter(logging.Filter):
    """Ensure session_id and event fields exist in log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "session_id"):
            record.session_id = "-"
        if not hasattr(record, "event"):
            record.event = None
        return True


class JsonFormatter(logging.Formatter):
    """JSON formatter with stable key ordering."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, object] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "session_id": getattr(record, "session_id", "-"),
            "message": record.getMessage(),
        }
        event = getattr(record, "event", None)
        if event is not None:
            log_data["event"] = event

        for key in _EXTRA_KEYS:
            if hasattr(record, key):
                log_data[key] = getattr(record, key)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, sort_keys=True, default=str)


def resolve_level(level_name: str) -> int:
    level = logging.getLevelName(level_name.strip().upper())
    if isinstance(level, int):
        return level
    return logging.INFO


def configure_logging(level: str = "INFO", log_format: str = "json") -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    numeric_level = resolve_level(level)
    logger.setLevel(numeric_level)
    logger.propagate = False

    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)
    if log_format == "text":
        handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    else:
        handler.setFormatter(JsonFormatter(datefmt=DATE_FORMAT))
    handler.addFilter(SessionContextFilter())
    logger.addHandler(handler)
    return logger
