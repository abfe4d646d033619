"""
Health endpoints for the Waqf Portal API.

Provides:
- /detailed - database and storage checks
- /keep-alive - database keep-alive ping (scheduled externally)
- /admin/monitoring - keep-alive history for the admin panel
"""
import time
from datetime import datetime, timezone
from typing import Dict, List, Literal, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.orm import Session

from app.api import deps
from app.api.auth_deps import require_admin
from app.core.config import settings
from app.schemas.error import ERROR_RESPONSES
from app.services import keep_alive_service
from app.services.data_store import SqlDataStore
from app.services.storage_service import StorageService

router = APIRouter(tags=["health"])
admin_router = APIRouter(tags=["admin"], dependencies=[Depends(require_admin)])


class ServiceHealth(BaseModel):
    status: Literal["healthy", "degraded", "unhealthy"]
    latency_ms: Optional[float] = None
    message: Optional[str] = None


class DetailedHealthResponse(BaseModel):
    status: Literal["healthy", "degraded", "unhealthy"]
    version: str
    environment: str
    timestamp: datetime
    services: Dict[str, ServiceHealth]


class KeepAliveResponse(BaseModel):
    success: bool
    timestamp: datetime
    message: Optional[str] = None
    error: Optional[str] = None


class KeepAliveLogRead(BaseModel):
    id: str
    status: str
    message: Optional[str] = None
    timestamp: datetime


class MonitoringResponse(BaseModel):
    total: int
    success: int
    error: int
    last_ping: Optional[datetime] = None
    logs: List[KeepAliveLogRead]


def check_database(db: Session) -> ServiceHealth:
    try:
        start = time.perf_counter()
        db.execute(text("SELECT 1"))
        latency = (time.perf_counter() - start) * 1000
        return ServiceHealth(status="healthy", latency_ms=round(latency, 2))
    except Exception as e:
        return ServiceHealth(status="unhealthy", message=str(e)[:100])


def check_storage(storage: StorageService) -> ServiceHealth:
    start = time.perf_counter()
    result = storage.health_check()
    latency = (time.perf_counter() - start) * 1000
    if result["status"] == "healthy":
        return ServiceHealth(status="healthy", latency_ms=round(latency, 2))
    return ServiceHealth(status="degraded", message=str(result.get("error"))[:100])


@router.get(
    "/detailed",
    response_model=DetailedHealthResponse,
    summary="Detailed health check",
)
def detailed_health(
    db: Session = Depends(deps.get_db),
    storage: StorageService = Depends(deps.get_storage),
):
    services = {
        "database": check_database(db),
        "storage": check_storage(storage),
    }
    if services["database"].status == "unhealthy":
        overall = "unhealthy"
    elif any(s.status != "healthy" for s in services.values()):
        overall = "degraded"
    else:
        overall = "healthy"

    body = DetailedHealthResponse(
        status=overall,
        version=settings.VERSION,
        environment=settings.ENVIRONMENT,
        timestamp=datetime.now(timezone.utc),
        services=services,
    )
    return JSONResponse(
        status_code=503 if overall == "unhealthy" else 200,
        content=body.model_dump(mode="json"),
    )


@router.post(
    "/keep-alive",
    response_model=KeepAliveResponse,
    summary="Database keep-alive ping",
)
def keep_alive(store: SqlDataStore = Depends(deps.get_data_store)):
    result = keep_alive_service.ping(store)
    body = KeepAliveResponse(
        success=result.success,
        timestamp=result.timestamp,
        message=result.message,
        error=result.error,
    )
    return JSONResponse(
        status_code=200 if result.success else 500,
        content=body.model_dump(mode="json"),
    )


@admin_router.get(
    "/monitoring",
    response_model=MonitoringResponse,
    summary="Keep-alive history",
    responses=ERROR_RESPONSES,
)
def monitoring(store: SqlDataStore = Depends(deps.get_data_store)):
    rows = keep_alive_service.history(store)
    logs = [KeepAliveLogRead(**{k: row[k] for k in ("id", "status", "message", "timestamp")}) for row in rows]
    return MonitoringResponse(
        total=len(logs),
        success=sum(1 for log in logs if log.status == "success"),
        error=sum(1 for log in logs if log.status == "error"),
        last_ping=logs[0].timestamp if logs else None,
        logs=logs,
    )
