"""FastAPI/Starlette integration for request sanitization."""
from __future__ import annotations

import asyncio
import time
from typing import Any

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import JSONResponse, Response
from starlette.routing import Match
from starlette.types import ASGIApp

from payload_sanitizer.core.walker import sanitize_target
from payload_sanitizer.exceptions import SanitizationError
from payload_sanitizer.observability.logging import get_logger
from payload_sanitizer.observability.metrics import record_target_duration
from payload_sanitizer.options import RequestTarget, SanitizerOptions

logger = get_logger("middleware")

STATE_ATTRIBUTE = "sanitized"


class SanitizationMiddleware(BaseHTTPMiddleware):
    """Sanitize the configured request targets before the endpoint runs.

    Results are exposed through :func:`get_sanitized` and the per-target
    helpers; the raw request is left untouched.
    """

    def __init__(self, app: ASGIApp, options: SanitizerOptions | None = None) -> None:
        super().__init__(app)
        self.options = options or SanitizerOptions.from_settings()

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        try:
            sanitized = await self._sanitize_request(request)
        except SanitizationError as exc:
            return JSONResponse(
                status_code=400,
                content={"detail": "Request sanitization failed", "field": exc.path},
            )
        setattr(request.state, STATE_ATTRIBUTE, sanitized)
        return await call_next(request)

    async def _sanitize_request(self, request: Request) -> dict[RequestTarget, Any]:
        payloads: dict[RequestTarget, dict[str, Any]] = {}
        for target in self.options.targets:
            payload = await _extract_target(request, target)
            if payload is None:
                logger.debug("Target not sanitized", extra={"target": target.value})
                continue
            payloads[target] = payload

        results = await asyncio.gather(
            *(self._sanitize_timed(target, payload) for target, payload in payloads.items())
        )
        return dict(zip(payloads, results))

    async def _sanitize_timed(
        self, target: RequestTarget, payload: dict[str, Any]
    ) -> dict[str, Any]:
        start = time.perf_counter()
        try:
            return await sanitize_target(payload, self.options)
        finally:
            record_target_duration(target.value, time.perf_counter() - start)


async def _extract_target(
    request: Request, target: RequestTarget
) -> dict[str, Any] | None:
    if target is RequestTarget.BODY:
        return await _json_body(request)
    if target is RequestTarget.QUERY:
        mapping = _query_mapping(request)
    elif target is RequestTarget.PARAMS:
        mapping = _path_params(request)
    else:
        mapping = dict(request.headers.items())
    return mapping or None


async def _json_body(request: Request) -> dict[str, Any] | None:
    content_type = request.headers.get("content-type", "")
    if "application/json" not in content_type:
        return None
    try:
        body = await request.json()
    except ValueError as exc:
        logger.warning(
            "Ignoring request body that is not valid JSON",
            extra={"path": request.url.path, "error": str(exc)},
        )
        return None
    return body if isinstance(body, dict) else None


def _query_mapping(request: Request) -> dict[str, Any]:
    query: dict[str, Any] = {}
    for key in request.query_params.keys():
        values = request.query_params.getlist(key)
        query[key] = values if len(values) > 1 else values[0]
    return query


def _path_params(request: Request) -> dict[str, Any]:
    # Routing has not run yet inside middleware; match the router directly.
    if request.path_params:
        return dict(request.path_params)
    router = getattr(request.app, "router", None)
    for route in getattr(router, "routes", ()):
        match, child_scope = route.matches(request.scope)
        if match is Match.FULL:
            return dict(child_scope.get("path_params", {}))
    return {}


def get_sanitized(request: Request, target: RequestTarget | str) -> Any | None:
    """Return the sanitized payload for ``target`` or None if it was not sanitized."""

    sanitized = getattr(request.state, STATE_ATTRIBUTE, None)
    if sanitized is None:
        return None
    return sanitized.get(RequestTarget(target))


def get_sanitized_body(request: Request) -> dict[str, Any] | None:
    return get_sanitized(request, RequestTarget.BODY)


def get_sanitized_query(request: Request) -> dict[str, Any] | None:
    return get_sanitized(request, RequestTarget.QUERY)


def get_sanitized_params(request: Request) -> dict[str, Any] | None:
    return get_sanitized(request, RequestTarget.PARAMS)


def get_sanitized_headers(request: Request) -> dict[str, Any] | None:
    return get_sanitized(request, RequestTarget.HEADERS)


__all__ = [
    "SanitizationMiddleware",
    "get_sanitized",
    "get_sanitized_body",
    "get_sanitized_headers",
    "get_sanitized_params",
    "get_sanitized_query",
]
