from __future__ import annotations

import os
from collections.abc import Callable, Generator
from dataclasses import dataclass, field
from typing import Any

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

os.environ.setdefault("ENV_FILE", os.devnull)

from payload_sanitizer import (  # noqa: E402
    SanitizationMiddleware,
    SanitizerOptions,
    get_sanitized_body,
    get_sanitized_headers,
    get_sanitized_params,
    get_sanitized_query,
)
from payload_sanitizer.config import get_settings  # noqa: E402

get_settings.cache_clear()


@dataclass
class EventRecorder:
    """Collects observer callback invocations in traversal order."""

    sanitized: list[tuple[str, Any, Any]] = field(default_factory=list)
    skipped: list[tuple[str, Any]] = field(default_factory=list)
    errors: list[tuple[Exception, str]] = field(default_factory=list)

    def on_sanitize(self, path: str, original: Any, result: Any) -> None:
        self.sanitized.append((path, original, result))

    def on_skip(self, path: str, value: Any) -> None:
        self.skipped.append((path, value))

    def on_error(self, error: Exception, path: str) -> None:
        self.errors.append((error, path))

    def callbacks(self) -> dict[str, Any]:
        return {
            "on_sanitize": self.on_sanitize,
            "on_skip": self.on_skip,
            "on_error": self.on_error,
        }


@pytest.fixture()
def events() -> EventRecorder:
    return EventRecorder()


@pytest.fixture()
def make_options(events: EventRecorder) -> Callable[..., SanitizerOptions]:
    def _make(**kwargs: Any) -> SanitizerOptions:
        return SanitizerOptions(**{**events.callbacks(), **kwargs})

    return _make


def build_app(options: SanitizerOptions) -> FastAPI:
    app = FastAPI()
    app.add_middleware(SanitizationMiddleware, options=options)

    @app.post("/echo")
    async def echo_body(request: Request) -> dict[str, Any]:
        return {
            "body": get_sanitized_body(request),
            "query": get_sanitized_query(request),
            "raw": (await request.body()).decode(),
        }

    @app.get("/echo")
    def echo_query(request: Request) -> dict[str, Any]:
        return {
            "query": get_sanitized_query(request),
            "body": get_sanitized_body(request),
        }

    @app.get("/users/{name}")
    def echo_params(name: str, request: Request) -> dict[str, Any]:
        return {"raw": name, "params": get_sanitized_params(request)}

    @app.get("/headers")
    def echo_headers(request: Request) -> dict[str, Any]:
        return {"headers": get_sanitized_headers(request)}

    return app


@pytest.fixture()
def make_client() -> Generator[Callable[..., TestClient], None, None]:
    clients: list[TestClient] = []

    def _make(options: SanitizerOptions | None = None) -> TestClient:
        client = TestClient(build_app(options or SanitizerOptions()))
        clients.append(client)
        return client

    yield _make
    for client in clients:
        client.close()
