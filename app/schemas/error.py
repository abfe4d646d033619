"""
Standardized error response schemas for the Waqf Portal API.

Follows RFC 7807 (Problem Details) structure for API errors.
"""
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ErrorDetail(BaseModel):
    """Detail about a specific error field."""

    loc: List[str] = Field(
        ..., description="Location of the error (e.g., ['body', 'judul'])"
    )
    msg: str = Field(..., description="Human-readable error message")
    type: str = Field(..., description="Error type identifier")


class ErrorResponse(BaseModel):
    """
    Standard error response format (RFC 7807 inspired).

    Attributes:
        error: Short error code (e.g., "DATA_UNAVAILABLE", "NOT_FOUND")
        message: Human-readable error description
        status_code: HTTP status code
        details: Optional list of specific error details
        request_id: X-Request-ID for tracing (if available)
        timestamp: When the error occurred
        path: API path that generated the error
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "DATA_UNAVAILABLE",
                "message": "Data tidak dapat dimuat.",
                "status_code": 503,
                "request_id": "550e8400-e29b-41d4-a716-446655440000",
                "timestamp": "2026-02-08T14:30:00Z",
                "path": "/api/v1/admin/logs",
            }
        }
    )

    error: str = Field(..., description="Error code")
    message: str = Field(..., description="Human-readable error message")
    status_code: int = Field(..., description="HTTP status code")
    details: Optional[List[ErrorDetail]] = Field(
        None, description="Detailed error information for validation errors"
    )
    request_id: Optional[str] = Field(
        None, description="Request ID for tracing and support"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the error occurred",
    )
    path: Optional[str] = Field(None, description="API path that generated the error")


class NotFoundError(ErrorResponse):
    """404 Not Found error response."""

    error: str = "NOT_FOUND"
    status_code: int = 404


class UnauthorizedError(ErrorResponse):
    """401 Unauthorized error response."""

    error: str = "UNAUTHORIZED"
    status_code: int = 401


class ForbiddenError(ErrorResponse):
    """403 Forbidden error response."""

    error: str = "FORBIDDEN"
    status_code: int = 403


class ServiceUnavailableError(ErrorResponse):
    """503 Data store unreachable."""

    error: str = "DATA_UNAVAILABLE"
    status_code: int = 503


# Common error responses for OpenAPI documentation
ERROR_RESPONSES = {
    401: {"model": UnauthorizedError, "description": "Unauthorized"},
    403: {"model": ForbiddenError, "description": "Forbidden"},
    404: {"model": NotFoundError, "description": "Not Found"},
    503: {"model": ServiceUnavailableError, "description": "Data could not be loaded"},
}
