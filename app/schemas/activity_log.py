from __future__ import annotations

from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator, model_validator


class AdminAction(str, Enum):
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    LOGIN = "LOGIN"
    LOGOUT = "LOGOUT"


# Pseudo-table used for LOGIN / LOGOUT entries
SESSION_TABLE = "auth"


class Document(RootModel[Any]):
    """
    Opaque snapshot of a record. The activity log never interprets it;
    viewers decode it when displaying a diff.
    """

    def as_data(self) -> Any:
        return self.root


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is stored in UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class AuditEntry(BaseModel):
    """
    What a mutation site reports to the audit logger. Actor fields are not
    part of it: the logger resolves the actor itself, and unknown fields
    passed by callers are dropped.
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    action: AdminAction
    target_table: str = Field(..., min_length=1)
    target_record_id: Optional[str] = None
    old_payload: Optional[Document] = None
    new_payload: Optional[Document] = None
    description: str = Field(..., min_length=1)

    @field_validator("target_table")
    @classmethod
    def strip_table(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("target_table must not be blank")
        return v

    @model_validator(mode="before")
    @classmethod
    def normalize_payloads(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        action = data.get("action")
        action = action.value if isinstance(action, AdminAction) else action

        if action in (AdminAction.LOGIN.value, AdminAction.LOGOUT.value):
            data["old_payload"] = None
            data["new_payload"] = None
            data["target_record_id"] = None
        elif action == AdminAction.CREATE.value:
            data["old_payload"] = None
        elif action == AdminAction.DELETE.value:
            data["new_payload"] = None
        return data

    @model_validator(mode="after")
    def require_payloads(self) -> "AuditEntry":
        if self.action in (AdminAction.CREATE, AdminAction.UPDATE) and self.new_payload is None:
            raise ValueError(f"{self.action.value} entries need new_payload")
        if self.action in (AdminAction.UPDATE, AdminAction.DELETE) and self.old_payload is None:
            raise ValueError(f"{self.action.value} entries need old_payload")
        return self

    @classmethod
    def session_event(cls, action: AdminAction, description: str) -> "AuditEntry":
        return cls(action=action, target_table=SESSION_TABLE, description=description)


class ActivityLogEntry(BaseModel):
    """One immutable row of the admin activity log."""

    model_config = ConfigDict(frozen=True)

    id: str
    created_at: datetime
    actor_id: str
    actor_email: str
    action: AdminAction
    target_table: str
    target_record_id: Optional[str] = None
    old_payload: Optional[Document] = None
    new_payload: Optional[Document] = None
    description: str

    @field_validator("created_at")
    @classmethod
    def created_at_utc(cls, v: datetime) -> datetime:
        return _as_utc(v)

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "ActivityLogEntry":
        return cls(
            id=row["id"],
            created_at=row["created_at"],
            actor_id=row["user_id"],
            actor_email=row.get("user_email") or "unknown",
            action=row["action"],
            target_table=row["table_name"],
            target_record_id=row.get("record_id"),
            old_payload=row.get("old_data"),
            new_payload=row.get("new_data"),
            description=row["description"],
        )


class ActivityStatRow(BaseModel):
    """Payload-free projection used for statistics."""

    model_config = ConfigDict(frozen=True)

    id: str
    created_at: datetime
    action: AdminAction
    target_table: str

    @field_validator("created_at")
    @classmethod
    def created_at_utc(cls, v: datetime) -> datetime:
        return _as_utc(v)

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "ActivityStatRow":
        return cls(
            id=row["id"],
            created_at=row["created_at"],
            action=row["action"],
            target_table=row["table_name"],
        )


class ActivityLogListResponse(BaseModel):
    total: int
    limit: int
    logs: List[ActivityLogEntry]
    tables: List[str] = Field(
        default_factory=list, description="Distinct table names in the fetched page"
    )


class DailyActivity(BaseModel):
    day: date
    label: str
    count: int


class ActionCount(BaseModel):
    action: AdminAction
    count: int


class TableCount(BaseModel):
    table: str
    count: int


class ActivityStatsResponse(BaseModel):
    range_days: int
    window_start: datetime
    total: int
    daily: List[DailyActivity]
    actions: List[ActionCount]
    tables: List[TableCount]
