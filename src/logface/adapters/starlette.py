"""
Starlette middleware that logs through a facade Logger.

- ``RequestLoggingMiddleware``: one entry per request with ``status``,
  ``method``, ``uri``, ``ip``, ``latency``, ``timestamp``, ``trace_id`` and
  ``error``; level follows the status code.
- ``RecoveryMiddleware``: logs unhandled exceptions and answers 500.
"""

from __future__ import annotations

import time
from datetime import datetime, timedelta, timezone

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response
from starlette.types import ASGIApp

from ..logger import Logger
from ..types import Field

TRACE_HEADER = "x-trace-id"


def _client_ip(request: Request) -> str:
    return request.client.host if request.client else ""


def _request_uri(request: Request) -> str:
    query = request.url.query
    return f"{request.url.path}?{query}" if query else request.url.path


def _trace_id(request: Request) -> str:
    trace_id = request.headers.get(TRACE_HEADER)
    if trace_id:
        return trace_id
    state_trace = getattr(request.state, "trace_id", None)
    if isinstance(state_trace, str) and state_trace:
        return state_trace
    return str(time.time_ns())


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, logger: Logger) -> None:
        super().__init__(app)
        self._logger = logger

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        latency = timedelta(seconds=time.perf_counter() - started)
        status = response.status_code

        fields = [
            Field("status", status),
            Field("method", request.method),
            Field("uri", _request_uri(request)),
            Field("ip", _client_ip(request)),
            Field("latency", latency),
            Field("timestamp", datetime.now(timezone.utc)),
            Field("trace_id", _trace_id(request)),
            Field("error", getattr(request.state, "error", None)),
        ]

        if status >= 500:
            self._logger.error("HTTP request", *fields)
        elif status >= 400:
            self._logger.warn("HTTP request", *fields)
        else:
            self._logger.info("HTTP request", *fields)
        return response


class RecoveryMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, logger: Logger) -> None:
        super().__init__(app)
        self._logger = logger

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        try:
            return await call_next(request)
        except Exception as e:
            self._logger.error(
                "Recovered from unhandled exception",
                Field("method", request.method),
                Field("uri", _request_uri(request)),
                Field("ip", _client_ip(request)),
                Field("error", e),
            )
            return PlainTextResponse("Internal Server Error", status_code=500)


def use_with_starlette(app, logger: Logger) -> None:
    """Install both middlewares; request logging wraps recovery so it sees the 500."""
    app.add_middleware(RecoveryMiddleware, logger=logger)
    app.add_middleware(RequestLoggingMiddleware, logger=logger)
