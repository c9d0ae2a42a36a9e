"""Traversal and policy engine."""
from payload_sanitizer.core.cleaning import clean_markup, strip_markup, transform
from payload_sanitizer.core.policy import (
    ResolvedPolicy,
    find_field_config,
    is_in_scope,
    resolve_policy,
)
from payload_sanitizer.core.walker import (
    TraversalContext,
    join_elements,
    sanitize,
    sanitize_target,
    sanitize_value,
)

__all__ = [
    "ResolvedPolicy",
    "TraversalContext",
    "clean_markup",
    "find_field_config",
    "is_in_scope",
    "join_elements",
    "resolve_policy",
    "sanitize",
    "sanitize_target",
    "sanitize_value",
    "strip_markup",
    "transform",
]
