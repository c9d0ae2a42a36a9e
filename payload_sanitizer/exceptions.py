"""Exception hierarchy for payload sanitization."""
from __future__ import annotations


class SanitizerError(Exception):
    """Base error for all sanitizer failures."""


class ConfigurationError(SanitizerError, ValueError):
    """Raised when sanitizer options are missing or invalid."""


class SanitizationError(SanitizerError):
    """Raised when a single field cannot be sanitized.

    Attributes:
        path: Dotted field-path of the node that failed.
    """

    def __init__(self, message: str, path: str) -> None:
        super().__init__(message)
        self.path = path


class MaxDepthExceededError(SanitizationError):
    """Raised when traversal would recurse past the configured depth."""

    def __init__(self, path: str, max_depth: int) -> None:
        super().__init__(
            f"Maximum recursion depth ({max_depth}) exceeded at path: {path}", path
        )
        self.max_depth = max_depth


class CustomSanitizerError(SanitizationError):
    """Raised when a caller-supplied field sanitizer fails.

    The original exception is chained as ``__cause__``.
    """

    def __init__(self, path: str, original: BaseException) -> None:
        super().__init__(
            f"Custom sanitizer failed at path {path}: {original!r}", path
        )
        self.original = original


__all__ = [
    "ConfigurationError",
    "CustomSanitizerError",
    "MaxDepthExceededError",
    "SanitizationError",
    "SanitizerError",
]
