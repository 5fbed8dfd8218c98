"""
Starlette request-logging and recovery middleware.
"""

from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from starlette.applications import Starlette
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from logface.adapters.starlette import (
    RecoveryMiddleware,
    RequestLoggingMiddleware,
    use_with_starlette,
)
from logface.types import LogLevel


async def ok(request: Request) -> JSONResponse:
    return JSONResponse({"ok": True})


async def missing(request: Request) -> PlainTextResponse:
    request.state.error = "no such item"
    return PlainTextResponse("not found", status_code=404)


async def broken(request: Request) -> PlainTextResponse:
    raise RuntimeError("kaboom")


class StateTraceMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        request.state.trace_id = "from-state"
        return await call_next(request)


def _app() -> Starlette:
    return Starlette(
        routes=[
            Route("/ok", ok),
            Route("/missing", missing),
            Route("/broken", broken),
        ]
    )


@pytest.fixture
def client(recording_logger):
    app = _app()
    use_with_starlette(app, recording_logger)
    with TestClient(app) as c:
        yield c


class TestRequestLogging:
    def test_success_logged_at_info(self, client, recording_logger) -> None:
        response = client.get("/ok?page=2", headers={"X-Trace-ID": "trace-123"})
        assert response.status_code == 200

        (entry,) = recording_logger.entries
        assert entry.level == LogLevel.INFO
        assert entry.message == "HTTP request"
        fields = entry.fields
        assert fields["status"] == 200
        assert fields["method"] == "GET"
        assert fields["uri"] == "/ok?page=2"
        assert fields["ip"] == "testclient"
        assert isinstance(fields["latency"], timedelta)
        assert isinstance(fields["timestamp"], datetime)
        assert fields["trace_id"] == "trace-123"
        assert fields["error"] is None

    def test_client_error_logged_at_warn(self, client, recording_logger) -> None:
        assert client.post("/missing").status_code == 404
        (entry,) = recording_logger.entries
        assert entry.level == LogLevel.WARN
        assert entry.fields["method"] == "POST"
        assert entry.fields["error"] == "no such item"

    def test_generated_trace_id(self, client, recording_logger) -> None:
        client.get("/ok")
        assert recording_logger.entries[0].fields["trace_id"].isdigit()

    def test_trace_id_from_request_state(self, recording_logger) -> None:
        app = _app()
        app.add_middleware(StateTraceMiddleware)
        app.add_middleware(RequestLoggingMiddleware, logger=recording_logger)
        with TestClient(app) as c:
            c.get("/ok")
        assert recording_logger.entries[0].fields["trace_id"] == "from-state"


class TestRecovery:
    def test_unhandled_exception_becomes_500(self, client, recording_logger) -> None:
        response = client.get("/broken")
        assert response.status_code == 500
        assert response.text == "Internal Server Error"

        recovered, request = recording_logger.entries
        assert recovered.level == LogLevel.ERROR
        assert recovered.message == "Recovered from unhandled exception"
        assert recovered.fields["uri"] == "/broken"
        assert isinstance(recovered.fields["error"], RuntimeError)

        assert request.level == LogLevel.ERROR
        assert request.message == "HTTP request"
        assert request.fields["status"] == 500

    def test_recovery_alone(self, recording_logger) -> None:
        app = _app()
        app.add_middleware(RecoveryMiddleware, logger=recording_logger)
        with TestClient(app) as c:
            assert c.get("/broken").status_code == 500
            assert c.get("/ok").status_code == 200
        assert len(recording_logger.entries) == 1
