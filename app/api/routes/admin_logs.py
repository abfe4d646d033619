"""
Admin activity log viewer and statistics.

GET /admin/logs        - most recent entries, optional action/table filter
GET /admin/logs/stats  - 7 or 30 day aggregates for the dashboard
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.auth_deps import get_audit_logger, require_admin
from app.core.config import settings
from app.schemas.activity_log import (
    ActivityLogListResponse,
    ActivityStatsResponse,
    AdminAction,
)
from app.schemas.error import ERROR_RESPONSES
from app.services import activity_stats
from app.services.audit_logger import AuditLogger, filter_entries

router = APIRouter(tags=["admin"], dependencies=[Depends(require_admin)])
logger = logging.getLogger(__name__)


@router.get(
    "",
    response_model=ActivityLogListResponse,
    summary="Recent admin activity",
    responses=ERROR_RESPONSES,
)
def list_logs(
    limit: int = Query(
        settings.AUDIT_LOG_DEFAULT_LIMIT, ge=1, le=settings.AUDIT_LOG_MAX_LIMIT
    ),
    action: Optional[AdminAction] = Query(None),
    table: Optional[str] = Query(None, min_length=1),
    audit: AuditLogger = Depends(get_audit_logger),
):
    entries = audit.list(limit=limit)
    tables = sorted({entry.target_table for entry in entries})
    filtered = filter_entries(entries, action=action, table=table)
    return ActivityLogListResponse(
        total=len(filtered), limit=limit, logs=filtered, tables=tables
    )


@router.get(
    "/stats",
    response_model=ActivityStatsResponse,
    summary="Activity statistics",
    responses=ERROR_RESPONSES,
)
def log_stats(
    range_days: int = Query(7, alias="range", description="7 or 30 days"),
    audit: AuditLogger = Depends(get_audit_logger),
):
    if range_days not in activity_stats.ALLOWED_RANGES:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="range harus 7 atau 30",
        )
    tz = activity_stats.display_timezone()
    window_start = activity_stats.window_start_for(range_days, tz=tz)
    rows = audit.stats_since(window_start)
    return activity_stats.summarize(rows, range_days, window_start, tz=tz)
