"""
Aggregations behind the activity statistics dashboard.

Everything here is pure: the rows come from ``AuditLogger.stats_since`` and
days are bucketed in the display timezone (Asia/Jakarta by default).
"""
from __future__ import annotations

from collections import Counter
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Dict, Iterable, List, Optional, Sequence
from zoneinfo import ZoneInfo

from app.core.config import settings
from app.schemas.activity_log import (
    ActionCount,
    ActivityStatRow,
    ActivityStatsResponse,
    DailyActivity,
    TableCount,
)

ALLOWED_RANGES = (7, 30)


def display_timezone() -> tzinfo:
    return ZoneInfo(settings.DISPLAY_TIMEZONE)


def window_start_for(days: int, now: Optional[datetime] = None, tz: Optional[tzinfo] = None) -> datetime:
    """Local midnight ``days`` days before ``now``."""
    tz = tz or display_timezone()
    now = now.astimezone(tz) if now else datetime.now(tz)
    start_day = now.date() - timedelta(days=days)
    return datetime.combine(start_day, time.min, tzinfo=tz)


def _local_day(row: ActivityStatRow, tz: tzinfo) -> date:
    return row.created_at.astimezone(tz).date()


def daily_counts(
    rows: Iterable[ActivityStatRow],
    window_start: datetime,
    today: date,
    tz: Optional[tzinfo] = None,
) -> List[DailyActivity]:
    """One bucket per calendar day from the window start through ``today``, zeros included."""
    tz = tz or display_timezone()
    first_day = window_start.astimezone(tz).date()

    counts: Dict[date, int] = Counter(_local_day(row, tz) for row in rows)
    buckets = []
    day = first_day
    while day <= today:
        buckets.append(
            DailyActivity(day=day, label=day.strftime("%d/%m"), count=counts.get(day, 0))
        )
        day += timedelta(days=1)
    return buckets


def _ranked(counter: Counter) -> List[tuple]:
    return sorted(counter.items(), key=lambda item: (-item[1], item[0]))


def action_distribution(rows: Iterable[ActivityStatRow]) -> List[ActionCount]:
    counter = Counter(row.action.value for row in rows)
    return [ActionCount(action=name, count=count) for name, count in _ranked(counter)]


def table_distribution(rows: Iterable[ActivityStatRow]) -> List[TableCount]:
    counter = Counter(row.target_table for row in rows)
    return [TableCount(table=name, count=count) for name, count in _ranked(counter)]


def summarize(
    rows: Sequence[ActivityStatRow],
    range_days: int,
    window_start: datetime,
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> ActivityStatsResponse:
    tz = tz or display_timezone()
    now = now.astimezone(tz) if now else datetime.now(tz)
    return ActivityStatsResponse(
        range_days=range_days,
        window_start=window_start,
        total=len(rows),
        daily=daily_counts(rows, window_start, now.date(), tz),
        actions=action_distribution(rows),
        tables=table_distribution(rows),
    )
