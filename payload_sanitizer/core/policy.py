"""Field-path policy resolution."""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from payload_sanitizer.options import (
    FieldConfig,
    FieldSanitizer,
    HtmlConfig,
    SanitizationMode,
    SanitizerOptions,
)


@dataclass(frozen=True)
class ResolvedPolicy:
    """Outcome of resolving a field-path against the active options."""

    in_scope: bool
    mode: SanitizationMode
    html_config: HtmlConfig | None = None
    sanitizer: FieldSanitizer | None = None
    from_field: bool = False


def _matches_any(path: str, patterns: Iterable[str]) -> bool:
    return any(path == pattern or path.startswith(f"{pattern}.") for pattern in patterns)


def is_in_scope(path: str, options: SanitizerOptions) -> bool:
    """Return True when the whitelist/blacklist allow ``path`` to be sanitized.

    A non-empty whitelist takes precedence and the blacklist is then ignored.
    """

    if options.whitelist:
        return _matches_any(path, options.whitelist)
    if options.blacklist:
        return not _matches_any(path, options.blacklist)
    return True


def find_field_config(
    path: str, fields: Mapping[str, FieldConfig]
) -> FieldConfig | None:
    """Return the override for ``path`` or its nearest configured ancestor."""

    if not fields:
        return None

    config = fields.get(path)
    if config is not None:
        return config

    parts = path.split(".")
    for end in range(len(parts) - 1, 0, -1):
        config = fields.get(".".join(parts[:end]))
        if config is not None:
            return config
    return None


def resolve_policy(path: str, options: SanitizerOptions) -> ResolvedPolicy:
    if not is_in_scope(path, options):
        return ResolvedPolicy(in_scope=False, mode=SanitizationMode.SKIP)

    config = find_field_config(path, options.fields)
    if config is None:
        return ResolvedPolicy(
            in_scope=True, mode=options.mode, html_config=options.html_config
        )

    return ResolvedPolicy(
        in_scope=True,
        mode=config.mode,
        html_config=(
            config.html_config
            if config.html_config is not None
            else options.html_config
        ),
        sanitizer=config.sanitizer,
        from_field=True,
    )


__all__ = ["ResolvedPolicy", "find_field_config", "is_in_scope", "resolve_policy"]
