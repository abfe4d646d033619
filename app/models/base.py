"""
Declarative base and shared column mixins.

The schema lives in Supabase PostgreSQL in production; column types are kept
portable so the same metadata runs on SQLite for local work and tests.
"""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import JSON, Column, DateTime, String, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declarative_base, declared_attr

Base = declarative_base()

# JSONB on PostgreSQL, plain JSON elsewhere
JSONDocument = JSON(none_as_null=True).with_variant(JSONB(none_as_null=True), "postgresql")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid4())


class UUIDMixin:
    """String UUID primary key generated at write time."""

    @declared_attr
    def id(cls):
        return Column(String(36), primary_key=True, default=new_id, nullable=False)


class CreatedAtMixin:
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        index=True,
    )


class TimestampMixin(CreatedAtMixin):
    """created_at plus updated_at refreshed on every update."""

    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
    )
