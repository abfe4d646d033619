"""
=============================================================================
WAQF PORTAL - ERROR HANDLING MODULE
=============================================================================
Global exception handlers for secure, user-friendly error responses.

Features:
- Catches unhandled exceptions
- Logs full stack trace server-side
- Maps data store / object store failures to explicit "could not load"
  responses so admin screens can show them
- Prevents information leakage in production

Usage:
    # In main.py
    from app.core.errors import register_exception_handlers
    register_exception_handlers(app)
=============================================================================
"""

import logging
import traceback
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.schemas.error import ErrorResponse
from app.services.data_store import DataStoreError
from app.services.storage_service import StorageError

logger = logging.getLogger(__name__)


def _error_body(request: Request, status_code: int, error: str, message: str) -> dict:
    return ErrorResponse(
        error=error,
        message=message,
        status_code=status_code,
        request_id=getattr(request.state, "request_id", None),
        timestamp=datetime.now(timezone.utc),
        path=request.url.path,
    ).model_dump(mode="json", exclude_none=True)


def register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers on the FastAPI app."""

    @app.exception_handler(DataStoreError)
    async def data_store_exception_handler(request: Request, exc: DataStoreError):
        logger.error(
            "Data store failure on %s %s: %s",
            request.method,
            request.url.path,
            exc,
        )
        return JSONResponse(
            status_code=503,
            content=_error_body(
                request, 503, "DATA_UNAVAILABLE", "Data tidak dapat dimuat."
            ),
        )

    @app.exception_handler(StorageError)
    async def storage_exception_handler(request: Request, exc: StorageError):
        logger.error(
            "Object store failure on %s %s: %s",
            request.method,
            request.url.path,
            exc,
        )
        return JSONResponse(
            status_code=502,
            content=_error_body(
                request, 502, "STORAGE_UNAVAILABLE", "Penyimpanan file tidak dapat diakses."
            ),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        Catch-all handler for unhandled exceptions.

        - Logs the full traceback for debugging
        - Returns a generic error message to prevent info leakage
        - In debug mode, includes more details
        """
        logger.error(
            f"Unhandled exception on {request.method} {request.url.path}:\n"
            f"{traceback.format_exc()}"
        )

        if settings.DEBUG:
            return JSONResponse(
                status_code=500,
                content={
                    "detail": "Internal Server Error",
                    "error_type": type(exc).__name__,
                    "message": str(exc),
                    "path": request.url.path,
                },
            )
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal Server Error",
                "message": "An unexpected error occurred. Please try again later.",
            },
        )
