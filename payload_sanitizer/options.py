"""Sanitizer option types and defaults."""
from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from payload_sanitizer.exceptions import ConfigurationError

if TYPE_CHECKING:
    from payload_sanitizer.config import SanitizerSettings


class SanitizationMode(StrEnum):
    """Strategy applied to a scalar value."""

    STRIP_ALL = "strip_all"
    ALLOW_LIST = "allow_list"
    SKIP = "skip"
    CUSTOM = "custom"


class ArrayStrategy(StrEnum):
    """How sequence values are treated."""

    SKIP = "skip"
    EACH = "each"
    JOIN = "join"


class RequestTarget(StrEnum):
    """Parts of an HTTP request that can be sanitized."""

    BODY = "body"
    QUERY = "query"
    PARAMS = "params"
    HEADERS = "headers"


FieldSanitizer = Callable[[Any], Any]
SanitizeCallback = Callable[[str, Any, Any], None]
SkipCallback = Callable[[str, Any], None]
ErrorCallback = Callable[[Exception, str], None]


def _optional_tuple(values: Iterable[str] | None) -> tuple[str, ...] | None:
    if values is None:
        return None
    if isinstance(values, str):
        return (values,)
    return tuple(values)


@dataclass(frozen=True)
class HtmlConfig:
    """Allow-list settings handed to the markup cleaner.

    Any setting left as ``None`` falls back to bleach's own default, so an empty
    ``HtmlConfig()`` means "use the cleaner's default policy".
    """

    tags: tuple[str, ...] | None = None
    attributes: tuple[str, ...] | Mapping[str, Sequence[str]] | None = None
    protocols: tuple[str, ...] | None = None
    forbid_tags: tuple[str, ...] = ()
    forbid_attributes: tuple[str, ...] = ()
    allow_data_attributes: bool = False
    strip_comments: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "tags", _optional_tuple(self.tags))
        object.__setattr__(self, "protocols", _optional_tuple(self.protocols))
        object.__setattr__(self, "forbid_tags", tuple(self.forbid_tags))
        object.__setattr__(self, "forbid_attributes", tuple(self.forbid_attributes))
        if isinstance(self.attributes, Mapping):
            per_tag = {tag: tuple(names) for tag, names in self.attributes.items()}
            object.__setattr__(self, "attributes", MappingProxyType(per_tag))
        else:
            object.__setattr__(self, "attributes", _optional_tuple(self.attributes))


@dataclass(frozen=True)
class FieldConfig:
    """Per-field override of the global sanitization policy."""

    mode: SanitizationMode
    html_config: HtmlConfig | None = None
    sanitizer: FieldSanitizer | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "mode", _coerce(SanitizationMode, self.mode, "mode"))
        if self.sanitizer is not None and not callable(self.sanitizer):
            raise ConfigurationError("Field sanitizer must be callable")
        if self.mode is SanitizationMode.CUSTOM and self.sanitizer is None:
            raise ConfigurationError("Custom mode requires a field sanitizer")


def _coerce(enum_type: type[StrEnum], value: Any, name: str) -> Any:
    try:
        return enum_type(value)
    except ValueError as exc:
        allowed = ", ".join(member.value for member in enum_type)
        raise ConfigurationError(
            f"Invalid {name} {value!r}; expected one of: {allowed}"
        ) from exc


@dataclass(frozen=True)
class SanitizerOptions:
    """Immutable configuration read by every recursive sanitize call."""

    mode: SanitizationMode = SanitizationMode.STRIP_ALL
    html_config: HtmlConfig | None = None
    whitelist: tuple[str, ...] = ()
    blacklist: tuple[str, ...] = ()
    fields: Mapping[str, FieldConfig] = field(default_factory=dict)
    deep: bool = True
    max_depth: int = 10
    arrays: ArrayStrategy = ArrayStrategy.EACH
    on_sanitize: SanitizeCallback | None = None
    on_skip: SkipCallback | None = None
    on_error: ErrorCallback | None = None
    throw_on_error: bool = False
    targets: tuple[RequestTarget, ...] = (RequestTarget.BODY,)

    def __post_init__(self) -> None:
        object.__setattr__(self, "mode", _coerce(SanitizationMode, self.mode, "mode"))
        object.__setattr__(self, "arrays", _coerce(ArrayStrategy, self.arrays, "arrays"))
        object.__setattr__(self, "whitelist", tuple(self.whitelist or ()))
        object.__setattr__(self, "blacklist", tuple(self.blacklist or ()))
        object.__setattr__(
            self,
            "targets",
            tuple(_coerce(RequestTarget, target, "target") for target in self.targets),
        )
        object.__setattr__(
            self,
            "fields",
            MappingProxyType(
                {path: _field_config(config) for path, config in (self.fields or {}).items()}
            ),
        )
        if self.mode is SanitizationMode.CUSTOM:
            raise ConfigurationError(
                "Custom mode is only available per field; set a FieldConfig instead"
            )
        if self.max_depth < 0:
            raise ConfigurationError("max_depth must not be negative")

    @classmethod
    def from_settings(
        cls, settings: SanitizerSettings | None = None, **overrides: Any
    ) -> SanitizerOptions:
        """Build options from environment settings, applying keyword overrides."""

        if settings is None:
            from payload_sanitizer.config import get_settings

            settings = get_settings()

        values: dict[str, Any] = {
            "mode": settings.mode,
            "targets": tuple(settings.targets),
            "deep": settings.deep,
            "max_depth": settings.max_depth,
            "arrays": settings.arrays,
            "throw_on_error": settings.throw_on_error,
        }
        values.update(overrides)
        return cls(**values)


def _field_config(config: FieldConfig | Mapping[str, Any]) -> FieldConfig:
    if isinstance(config, FieldConfig):
        return config
    if isinstance(config, Mapping):
        return FieldConfig(**config)
    raise ConfigurationError(f"Unsupported field configuration: {config!r}")


__all__ = [
    "ArrayStrategy",
    "ErrorCallback",
    "FieldConfig",
    "FieldSanitizer",
    "HtmlConfig",
    "RequestTarget",
    "SanitizationMode",
    "SanitizeCallback",
    "SanitizerOptions",
    "SkipCallback",
]
