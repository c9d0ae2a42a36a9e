"""Prometheus metrics for sanitizer activity."""
from __future__ import annotations

from prometheus_client import Counter, Histogram

FIELDS_SANITIZED_COUNTER = Counter(
    "sanitizer_fields_sanitized_total",
    "Number of field values rewritten by the sanitizer, by mode.",
    labelnames=("mode",),
)
FIELDS_SKIPPED_COUNTER = Counter(
    "sanitizer_fields_skipped_total",
    "Number of field values left untouched by policy.",
)
SANITIZATION_ERRORS_COUNTER = Counter(
    "sanitizer_errors_total",
    "Number of contained or propagated sanitization failures, by kind.",
    labelnames=("kind",),
)
TARGET_DURATION = Histogram(
    "sanitizer_target_duration_seconds",
    "Time spent sanitizing one request target.",
    labelnames=("target",),
)


def record_field_sanitized(mode: str) -> None:
    FIELDS_SANITIZED_COUNTER.labels(mode=mode).inc()


def record_field_skipped() -> None:
    FIELDS_SKIPPED_COUNTER.inc()


def record_sanitization_error(error: BaseException) -> None:
    """Count a failure under its exception class name."""

    SANITIZATION_ERRORS_COUNTER.labels(kind=type(error).__name__).inc()


def record_target_duration(target: str, duration: float) -> None:
    TARGET_DURATION.labels(target=target).observe(duration)


__all__ = [
    "FIELDS_SANITIZED_COUNTER",
    "FIELDS_SKIPPED_COUNTER",
    "SANITIZATION_ERRORS_COUNTER",
    "TARGET_DURATION",
    "record_field_sanitized",
    "record_field_skipped",
    "record_sanitization_error",
    "record_target_duration",
]
