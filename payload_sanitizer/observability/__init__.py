"""Logging and metrics helpers."""
from payload_sanitizer.observability.logging import get_logger, setup_structured_logging
from payload_sanitizer.observability.metrics import (
    FIELDS_SANITIZED_COUNTER,
    FIELDS_SKIPPED_COUNTER,
    SANITIZATION_ERRORS_COUNTER,
    TARGET_DURATION,
    record_field_sanitized,
    record_field_skipped,
    record_sanitization_error,
    record_target_duration,
)

__all__ = [
    "FIELDS_SANITIZED_COUNTER",
    "FIELDS_SKIPPED_COUNTER",
    "SANITIZATION_ERRORS_COUNTER",
    "TARGET_DURATION",
    "get_logger",
    "record_field_sanitized",
    "record_field_skipped",
    "record_sanitization_error",
    "record_target_duration",
    "setup_structured_logging",
]
