"""Recursive traversal of JSON-like payloads.

The walker visits every node of a target mapping, resolves the policy for the
node's dotted field-path and rebuilds a new tree bottom-up. Inputs are never
mutated. Failures are raised as :class:`SanitizationError` subclasses and either
contained per node (reported through ``on_error``) or propagated to the caller
of :func:`sanitize_target` when ``throw_on_error`` is set.
"""
from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import Any

from payload_sanitizer.core.cleaning import apply_custom, transform
from payload_sanitizer.core.policy import ResolvedPolicy, resolve_policy
from payload_sanitizer.exceptions import (
    CustomSanitizerError,
    MaxDepthExceededError,
    SanitizationError,
)
from payload_sanitizer.observability.logging import get_logger
from payload_sanitizer.observability.metrics import (
    record_field_sanitized,
    record_field_skipped,
    record_sanitization_error,
)
from payload_sanitizer.options import (
    ArrayStrategy,
    FieldSanitizer,
    SanitizationMode,
    SanitizerOptions,
)

logger = get_logger("walker")


@dataclass(frozen=True)
class TraversalContext:
    """Per-call traversal state; extending it returns a new context."""

    options: SanitizerOptions
    depth: int = 0
    path: tuple[str, ...] = ()

    @property
    def field_path(self) -> str:
        return ".".join(self.path)

    def child(self, segment: Any, *, descend: bool = False) -> TraversalContext:
        return replace(
            self,
            path=(*self.path, str(segment)),
            depth=self.depth + 1 if descend else self.depth,
        )


def _notify_sanitized(
    options: SanitizerOptions,
    path: str,
    original: Any,
    result: Any,
    mode: SanitizationMode,
) -> None:
    record_field_sanitized(mode.value)
    if options.on_sanitize is not None:
        options.on_sanitize(path, original, result)


def _notify_skipped(options: SanitizerOptions, path: str, value: Any) -> None:
    record_field_skipped()
    if options.on_skip is not None:
        options.on_skip(path, value)


def _join_text(item: Any) -> str:
    if isinstance(item, str):
        return item
    if item is None:
        return ""
    try:
        return json.dumps(item, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError):
        return str(item)


def join_elements(values: Sequence[Any]) -> str:
    """Join sequence elements with single spaces.

    Strings are used as-is, ``None`` becomes an empty string and every other
    element is rendered as compact JSON text, falling back to ``str()``.
    """

    return " ".join(_join_text(item) for item in values)


async def _apply_custom(
    value: Any, path: str, sanitizer: FieldSanitizer, options: SanitizerOptions
) -> Any:
    try:
        result = await apply_custom(value, sanitizer)
    except Exception as exc:
        raise CustomSanitizerError(path, exc) from exc
    _notify_sanitized(options, path, value, result, SanitizationMode.CUSTOM)
    return result


def _sanitize_string(
    value: str, path: str, policy: ResolvedPolicy, options: SanitizerOptions
) -> str:
    result = transform(value, policy.mode, policy.html_config)
    if result != value:
        _notify_sanitized(options, path, value, result, policy.mode)
    return result


async def _sanitize_sequence(
    value: list[Any] | tuple[Any, ...],
    context: TraversalContext,
    policy: ResolvedPolicy,
) -> Any:
    options = context.options
    path = context.field_path

    if options.arrays is ArrayStrategy.SKIP:
        _notify_skipped(options, path, value)
        return value

    if options.arrays is ArrayStrategy.JOIN and policy.mode is not SanitizationMode.SKIP:
        result = transform(join_elements(value), policy.mode, policy.html_config)
        _notify_sanitized(options, path, value, result, policy.mode)
        return result

    items = [
        await sanitize_value(item, context.child(index))
        for index, item in enumerate(value)
    ]
    return items if isinstance(value, list) else tuple(items)


async def _sanitize_mapping(
    value: dict[Any, Any], context: TraversalContext
) -> dict[Any, Any]:
    options = context.options
    if context.depth >= options.max_depth:
        raise MaxDepthExceededError(context.field_path, options.max_depth)

    sanitized: dict[Any, Any] = {}
    for key, item in value.items():
        sanitized[key] = await sanitize_value(item, context.child(key, descend=True))
    return sanitized


async def _sanitize_node(value: Any, context: TraversalContext) -> Any:
    options = context.options
    path = context.field_path
    policy = resolve_policy(path, options)

    if not policy.in_scope:
        _notify_skipped(options, path, value)
        return value

    if policy.mode is SanitizationMode.CUSTOM and policy.sanitizer is not None:
        return await _apply_custom(value, path, policy.sanitizer, options)

    # a global skip still descends so field overrides below it apply
    if policy.mode is SanitizationMode.SKIP and policy.from_field:
        _notify_skipped(options, path, value)
        return value

    if isinstance(value, str):
        if policy.mode is SanitizationMode.SKIP:
            _notify_skipped(options, path, value)
            return value
        return _sanitize_string(value, path, policy, options)

    if isinstance(value, (list, tuple)):
        return await _sanitize_sequence(value, context, policy)

    if isinstance(value, dict) and options.deep:
        return await _sanitize_mapping(value, context)

    return value


def _contain(error: SanitizationError, path: str, options: SanitizerOptions) -> None:
    record_sanitization_error(error)
    logger.warning(
        "Contained sanitization failure",
        extra={"path": path, "error_type": type(error).__name__, "error": str(error)},
    )
    if options.on_error is None:
        return
    try:
        options.on_error(error, path)
    except Exception:
        logger.exception("on_error callback failed", extra={"path": path})


async def sanitize_value(value: Any, context: TraversalContext) -> Any:
    """Sanitize one node, containing or propagating failures at this path."""

    options = context.options
    path = context.field_path
    try:
        return await _sanitize_node(value, context)
    except SanitizationError as exc:
        if options.throw_on_error:
            raise
        _contain(exc, path, options)
    except Exception as exc:
        error = SanitizationError(f"Failed to sanitize field {path}: {exc}", path)
        if options.throw_on_error:
            raise error from exc
        error.__cause__ = exc
        _contain(error, path, options)
    return value


async def sanitize_target(
    target: dict[str, Any], options: SanitizerOptions
) -> dict[str, Any]:
    """Return a sanitized copy of one top-level mapping.

    Anything that is not a ``dict`` is returned unchanged. With
    ``throw_on_error`` the first failure aborts the whole target.
    """

    if not isinstance(target, dict):
        logger.debug(
            "Skipping non-mapping target", extra={"value_type": type(target).__name__}
        )
        return target

    context = TraversalContext(options=options)
    sanitized: dict[str, Any] = {}
    try:
        for key, value in target.items():
            sanitized[key] = await sanitize_value(value, context.child(key))
    except SanitizationError as exc:
        record_sanitization_error(exc)
        logger.warning(
            "Sanitization aborted",
            extra={"path": exc.path, "error_type": type(exc).__name__},
        )
        raise
    return sanitized


async def sanitize(value: Any, options: SanitizerOptions | None = None) -> Any:
    """Sanitize any JSON-like value.

    Mappings are treated as a target; other values are sanitized as a single
    node at the empty path.
    """

    options = options or SanitizerOptions()
    if isinstance(value, dict):
        return await sanitize_target(value, options)

    try:
        return await sanitize_value(value, TraversalContext(options=options))
    except SanitizationError as exc:
        record_sanitization_error(exc)
        raise


__all__ = [
    "TraversalContext",
    "join_elements",
    "sanitize",
    "sanitize_target",
    "sanitize_value",
]
