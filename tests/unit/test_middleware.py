import logging

import anyio
import pytest
from starlette.requests import Request
from starlette.responses import Response

from app.core import middleware as middleware_module
from app.core.middleware import LatencyMonitorMiddleware, RequestIdMiddleware


def _build_request(path: str = "/test", headers=None) -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": path,
        "headers": headers or [],
        "query_string": b"",
        "scheme": "http",
        "server": ("testserver", 80),
        "client": ("testclient", 1234),
    }
    return Request(scope)


async def ok_call_next(_):
    return Response("ok", status_code=200)


def test_request_id_generated_and_returned():
    middleware = RequestIdMiddleware(lambda scope, receive, send: None)
    request = _build_request()

    response = anyio.run(middleware.dispatch, request, ok_call_next)

    assert len(response.headers["X-Request-ID"]) == 36
    assert request.state.request_id == response.headers["X-Request-ID"]


def test_request_id_preserved_from_client():
    middleware = RequestIdMiddleware(lambda scope, receive, send: None)
    request = _build_request(headers=[(b"x-request-id", b"abc-123")])

    response = anyio.run(middleware.dispatch, request, ok_call_next)

    assert response.headers["X-Request-ID"] == "abc-123"


def test_latency_header_added():
    middleware = LatencyMonitorMiddleware(lambda scope, receive, send: None)

    response = anyio.run(middleware.dispatch, _build_request(), ok_call_next)

    assert float(response.headers["X-Process-Time"]) >= 0


@pytest.mark.parametrize(
    "path,breached",
    [
        ("/api/v1/admin/logs", True),
        ("/api/v1/admin/logs/stats", True),
        ("/api/v1/admin/logsx", False),
        ("/unmonitored", False),
    ],
)
def test_slo_breach_logged(path, breached, monkeypatch, caplog):
    monkeypatch.setitem(middleware_module.SLO_THRESHOLDS, "/api/v1/admin/logs", 0.0001)
    middleware = LatencyMonitorMiddleware(lambda scope, receive, send: None)

    with caplog.at_level(logging.WARNING, logger="waqf_portal.latency"):
        middleware._check_slo(path, 1.0)

    assert ("SLO_BREACH" in caplog.text) is breached


def test_cors_preflight_for_dev_origin(client):
    response = client.request(
        "OPTIONS",
        "/api/v1/admin/logs",
        headers={
            "Origin": "http://localhost:5173",
            "Access-Control-Request-Method": "GET",
            "Access-Control-Request-Headers": "Authorization",
        },
    )
    assert response.status_code in (200, 204)
    assert response.headers["access-control-allow-origin"] == "http://localhost:5173"
