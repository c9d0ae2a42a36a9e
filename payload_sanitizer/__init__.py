"""Policy-driven markup sanitization for JSON-like payloads."""
from payload_sanitizer.core.walker import sanitize, sanitize_target, sanitize_value
from payload_sanitizer.exceptions import (
    ConfigurationError,
    CustomSanitizerError,
    MaxDepthExceededError,
    SanitizationError,
    SanitizerError,
)
from payload_sanitizer.middleware import (
    SanitizationMiddleware,
    get_sanitized,
    get_sanitized_body,
    get_sanitized_headers,
    get_sanitized_params,
    get_sanitized_query,
)
from payload_sanitizer.options import (
    ArrayStrategy,
    FieldConfig,
    HtmlConfig,
    RequestTarget,
    SanitizationMode,
    SanitizerOptions,
)
from payload_sanitizer.presets import PRESETS, get_preset

__version__ = "1.0.0"

__all__ = [
    "ArrayStrategy",
    "ConfigurationError",
    "CustomSanitizerError",
    "FieldConfig",
    "HtmlConfig",
    "MaxDepthExceededError",
    "PRESETS",
    "RequestTarget",
    "SanitizationError",
    "SanitizationMiddleware",
    "SanitizationMode",
    "SanitizerError",
    "SanitizerOptions",
    "get_preset",
    "get_sanitized",
    "get_sanitized_body",
    "get_sanitized_headers",
    "get_sanitized_params",
    "get_sanitized_query",
    "sanitize",
    "sanitize_target",
    "sanitize_value",
]
