"""Environment-driven defaults for the sanitizer."""
from __future__ import annotations

import os
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from payload_sanitizer.options import ArrayStrategy, RequestTarget, SanitizationMode


class SanitizerSettings(BaseSettings):
    """Sanitizer defaults loaded from ``SANITIZER_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SANITIZER_", env_file_encoding="utf-8", extra="ignore"
    )

    mode: SanitizationMode = SanitizationMode.STRIP_ALL
    targets: list[RequestTarget] = Field(default_factory=lambda: [RequestTarget.BODY])
    deep: bool = True
    max_depth: int = Field(10, ge=0)
    arrays: ArrayStrategy = ArrayStrategy.EACH
    throw_on_error: bool = False
    log_level: str = "INFO"


@lru_cache
def get_settings() -> SanitizerSettings:
    """Return cached settings instance."""

    env_file = os.environ.get("ENV_FILE")
    if env_file:
        return SanitizerSettings(_env_file=env_file)
    return SanitizerSettings(_env_file=".env")
