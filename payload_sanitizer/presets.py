"""Ready-made option bundles for common payload shapes."""
from __future__ import annotations

from dataclasses import replace
from typing import Any

from payload_sanitizer.options import (
    HtmlConfig,
    RequestTarget,
    SanitizationMode,
    SanitizerOptions,
)

STRICT = SanitizerOptions(
    mode=SanitizationMode.STRIP_ALL,
    targets=(RequestTarget.BODY, RequestTarget.QUERY, RequestTarget.PARAMS),
)

RICH_TEXT = SanitizerOptions(
    mode=SanitizationMode.ALLOW_LIST,
    targets=(RequestTarget.BODY,),
    html_config=HtmlConfig(
        tags=(
            "p",
            "br",
            "strong",
            "em",
            "u",
            "h1",
            "h2",
            "h3",
            "h4",
            "h5",
            "h6",
            "ul",
            "ol",
            "li",
            "a",
            "blockquote",
            "code",
            "pre",
        ),
        attributes=("href", "target", "rel"),
    ),
)

MARKDOWN = SanitizerOptions(
    mode=SanitizationMode.ALLOW_LIST,
    targets=(RequestTarget.BODY,),
    html_config=HtmlConfig(
        tags=("p", "br", "strong", "em", "code", "pre", "a"),
        attributes=("href",),
    ),
)

COMMENTS = SanitizerOptions(
    mode=SanitizationMode.STRIP_ALL,
    targets=(RequestTarget.BODY,),
    deep=True,
)

PRESETS: dict[str, SanitizerOptions] = {
    "strict": STRICT,
    "rich_text": RICH_TEXT,
    "markdown": MARKDOWN,
    "comments": COMMENTS,
}


def get_preset(name: str, **overrides: Any) -> SanitizerOptions:
    """Return the named preset with ``overrides`` applied.

    Raises:
        KeyError: if no preset is registered under ``name``.
    """

    try:
        preset = PRESETS[name]
    except KeyError:
        raise KeyError(f"Unknown sanitizer preset: {name!r}") from None
    return replace(preset, **overrides) if overrides else preset


__all__ = ["COMMENTS", "MARKDOWN", "PRESETS", "RICH_TEXT", "STRICT", "get_preset"]
