import logging
import time
import uuid

import structlog
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("waqf_portal.latency")

# Service Level Objectives (SLOs) - max latency per endpoint prefix
SLO_THRESHOLDS = {
    "/api/v1/content/": 0.300,
    "/api/v1/admin/logs": 0.800,
    "/dokumentasi": 0.500,
    "/api/v1/health": 0.200,
}


class LatencyMonitorMiddleware(BaseHTTPMiddleware):
    """
    Middleware to monitor request latency and check against defined SLOs.
    Logs warnings if SLO is breached.
    """

    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()

        response = await call_next(request)

        process_time = time.perf_counter() - start_time
        response.headers["X-Process-Time"] = str(process_time)

        self._check_slo(request.url.path, process_time)

        return response

    def _check_slo(self, path: str, duration: float):
        budget = None
        for slo_path, limit in SLO_THRESHOLDS.items():
            if path == slo_path or (
                slo_path.endswith("/") and path.startswith(slo_path)
            ) or path.startswith(slo_path + "/"):
                budget = limit
                break

        if budget and duration > budget:
            logger.warning(
                "SLO_BREACH | Endpoint: %s | Duration: %.4fs | Budget: %.3fs",
                path,
                duration,
                budget,
            )


class RequestIdMiddleware(BaseHTTPMiddleware):
    """
    Middleware to add X-Request-ID header for tracing.

    If the client sends X-Request-ID, it is preserved.
    Otherwise, a new UUID is generated.

    The request ID is:
    - Available in request.state.request_id for logging
    - Bound to structlog contextvars for every log line of the request
    - Returned in response headers for client correlation
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("X-Request-ID")
        if not request_id:
            request_id = str(uuid.uuid4())

        request.state.request_id = request_id
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=request_id)

        logger.info(
            "REQUEST | id=%s | method=%s | path=%s",
            request_id,
            request.method,
            request.url.path,
        )

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id

        return response
