"""Scalar transformations backed by bleach."""
from __future__ import annotations

import inspect
import re
from collections.abc import Callable, Collection, Mapping, Sequence
from typing import Any

import bleach
from bleach.sanitizer import ALLOWED_ATTRIBUTES, ALLOWED_PROTOCOLS, ALLOWED_TAGS

from payload_sanitizer.options import FieldSanitizer, HtmlConfig, SanitizationMode

# Elements whose text content is never rendered as prose; bleach would keep it.
RAW_CONTENT_TAGS: tuple[str, ...] = (
    "script",
    "style",
    "iframe",
    "noscript",
    "template",
    "title",
    "textarea",
    "xmp",
    "noembed",
    "noframes",
)

_RAW_CONTENT_PATTERNS: dict[str, re.Pattern[str]] = {
    tag: re.compile(
        rf"<{tag}\b[^>]*>.*?(?:</{tag}\s*>|$)", re.IGNORECASE | re.DOTALL
    )
    for tag in RAW_CONTENT_TAGS
}

_STRIP_ALL_CONFIG = HtmlConfig(tags=(), attributes=())

AttributeFilter = Callable[[str, str, str], bool]


def _drop_raw_content(value: str, allowed_tags: Collection[str]) -> str:
    previous = None
    while previous != value:
        previous = value
        for tag, pattern in _RAW_CONTENT_PATTERNS.items():
            if tag not in allowed_tags:
                value = pattern.sub("", value)
    return value


def _attribute_filter(
    allowed: Sequence[str] | Mapping[str, Sequence[str]],
    forbidden: Collection[str],
    allow_data: bool,
) -> AttributeFilter:
    def _allow(tag: str, name: str, value: str) -> bool:
        if name in forbidden:
            return False
        if allow_data and name.startswith("data-"):
            return True
        if isinstance(allowed, Mapping):
            return name in allowed.get(tag, ()) or name in allowed.get("*", ())
        return name in allowed

    return _allow


def _bleach_arguments(config: HtmlConfig) -> dict[str, Any]:
    tags = set(ALLOWED_TAGS if config.tags is None else config.tags)
    tags.difference_update(config.forbid_tags)

    attributes: Any = ALLOWED_ATTRIBUTES if config.attributes is None else config.attributes
    if config.forbid_attributes or config.allow_data_attributes:
        attributes = _attribute_filter(
            attributes, frozenset(config.forbid_attributes), config.allow_data_attributes
        )
    elif isinstance(attributes, Mapping):
        # bleach only accepts a plain dict of lists
        attributes = {tag: list(names) for tag, names in attributes.items()}
    else:
        attributes = list(attributes)

    return {
        "tags": frozenset(tags),
        "attributes": attributes,
        "protocols": frozenset(
            ALLOWED_PROTOCOLS if config.protocols is None else config.protocols
        ),
        "strip": True,
        "strip_comments": config.strip_comments,
    }


def clean_markup(value: str, config: HtmlConfig | None = None) -> str:
    """Remove every tag and attribute not permitted by ``config``.

    Disallowed tags are stripped while their text is kept, except for
    raw-content elements such as ``<script>`` which are dropped entirely.
    ``None`` applies bleach's default allow-list.
    """

    arguments = _bleach_arguments(config or HtmlConfig())
    value = _drop_raw_content(value, arguments["tags"])
    return bleach.clean(value, **arguments)


def strip_markup(value: str) -> str:
    """Remove all markup, keeping only text content."""

    return clean_markup(value, _STRIP_ALL_CONFIG)


def transform(
    value: str, mode: SanitizationMode, html_config: HtmlConfig | None = None
) -> str:
    if mode is SanitizationMode.STRIP_ALL:
        return strip_markup(value)
    if mode is SanitizationMode.ALLOW_LIST:
        return clean_markup(value, html_config)
    # skip, and custom without a function, leave the value alone
    return value


async def apply_custom(value: Any, sanitizer: FieldSanitizer) -> Any:
    """Run a caller-supplied field sanitizer, awaiting it when it is a coroutine."""

    result = sanitizer(value)
    if inspect.isawaitable(result):
        result = await result
    return result


__all__ = [
    "RAW_CONTENT_TAGS",
    "apply_custom",
    "clean_markup",
    "strip_markup",
    "transform",
]
