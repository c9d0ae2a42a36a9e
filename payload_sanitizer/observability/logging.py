"""Structured logging for sanitizer events."""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

ROOT_LOGGER_NAME = "payload_sanitizer"

RESERVED_RECORD_FIELDS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__
) | {"message", "asctime", "taskName"}


class StructuredLogFormatter(logging.Formatter):
    """Render log records as single-line JSON documents."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key in RESERVED_RECORD_FIELDS or key.startswith("_"):
                continue
            payload[key] = value

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


def setup_structured_logging(level: int | str | None = None) -> logging.Logger:
    """Attach a JSON handler to the package logger once.

    When ``level`` is omitted the ``SANITIZER_LOG_LEVEL`` setting is used.
    """

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    if level is None:
        from payload_sanitizer.config import get_settings

        level = get_settings().log_level
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    logger.setLevel(level)
    for handler in logger.handlers:
        if isinstance(handler.formatter, StructuredLogFormatter):
            return logger

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredLogFormatter())
    logger.addHandler(handler)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a child of the package logger."""

    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


__all__ = [
    "ROOT_LOGGER_NAME",
    "StructuredLogFormatter",
    "get_logger",
    "setup_structured_logging",
]
