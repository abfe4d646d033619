"""
Table-oriented data store used by every admin and public code path.

Collections are the tables registered on ``Base.metadata``; records are
plain dicts. ``SqlDataStore`` issues SQLAlchemy Core statements on the
request-scoped session and commits each write on its own, so a content
mutation is durable before anything else (the audit write) runs.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol, Sequence

from sqlalchemy import Table, delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models import Base

logger = logging.getLogger(__name__)

# Rows in these collections are written once and never changed.
APPEND_ONLY_COLLECTIONS = frozenset({"admin_logs"})

_OPERATORS = {
    "eq": lambda column, value: column == value,
    "neq": lambda column, value: column != value,
    "gt": lambda column, value: column > value,
    "gte": lambda column, value: column >= value,
    "lt": lambda column, value: column < value,
    "lte": lambda column, value: column <= value,
}


class DataStoreError(Exception):
    """A data store operation failed (unknown collection, driver or network error)."""

    def __init__(self, message: str, collection: Optional[str] = None):
        self.message = message
        self.collection = collection
        super().__init__(message)


@dataclass(frozen=True)
class Filter:
    column: str
    op: str
    value: Any

    @classmethod
    def eq(cls, column: str, value: Any) -> "Filter":
        return cls(column, "eq", value)

    @classmethod
    def gte(cls, column: str, value: Any) -> "Filter":
        return cls(column, "gte", value)


@dataclass(frozen=True)
class OrderBy:
    column: str
    descending: bool = False


Record = Dict[str, Any]


class DataStore(Protocol):
    def insert(self, collection: str, record: Record) -> Record: ...

    def select(
        self,
        collection: str,
        filters: Optional[Sequence[Filter]] = None,
        order_by: Optional[Sequence[OrderBy]] = None,
        limit: Optional[int] = None,
        columns: Optional[Sequence[str]] = None,
    ) -> List[Record]: ...

    def get(self, collection: str, record_id: str) -> Optional[Record]: ...

    def update(self, collection: str, record_id: str, patch: Record) -> Optional[Record]: ...

    def delete(self, collection: str, record_id: str) -> bool: ...


class SqlDataStore:
    """DataStore over the application's SQLAlchemy metadata."""

    def __init__(self, db: Session):
        self.db = db

    def _table(self, collection: str) -> Table:
        table = Base.metadata.tables.get(collection)
        if table is None:
            raise DataStoreError(f"Unknown collection: {collection}", collection)
        return table

    def _column(self, table: Table, name: str):
        if name not in table.c:
            raise DataStoreError(f"Unknown column {table.name}.{name}", table.name)
        return table.c[name]

    def _clean(self, table: Table, record: Record) -> Record:
        unknown = set(record) - set(table.c.keys())
        if unknown:
            raise DataStoreError(
                f"Unknown columns for {table.name}: {', '.join(sorted(unknown))}",
                table.name,
            )
        return dict(record)

    def _guard_append_only(self, collection: str, operation: str) -> None:
        if collection in APPEND_ONLY_COLLECTIONS:
            raise DataStoreError(
                f"{collection} is append-only; {operation} is not allowed", collection
            )

    def _write(self, statement, collection: str, returning: bool = True):
        """Execute one write and commit it. Returns (rows, rowcount)."""
        try:
            result = self.db.execute(statement)
            rows = [dict(row) for row in result.mappings().all()] if returning else []
            rowcount = result.rowcount
            self.db.commit()
            return rows, rowcount
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.warning("Write on %s failed: %s", collection, exc)
            raise DataStoreError(f"Write on {collection} failed", collection) from exc

    def insert(self, collection: str, record: Record) -> Record:
        table = self._table(collection)
        values = self._clean(table, record)
        rows, _ = self._write(insert(table).values(**values).returning(*table.c), collection)
        return rows[0]

    def select(
        self,
        collection: str,
        filters: Optional[Sequence[Filter]] = None,
        order_by: Optional[Sequence[OrderBy]] = None,
        limit: Optional[int] = None,
        columns: Optional[Sequence[str]] = None,
    ) -> List[Record]:
        table = self._table(collection)
        selected = [self._column(table, name) for name in columns] if columns else [table]
        stmt = select(*selected)

        for item in filters or ():
            operator = _OPERATORS.get(item.op)
            if operator is None:
                raise DataStoreError(f"Unsupported filter operator: {item.op}", collection)
            stmt = stmt.where(operator(self._column(table, item.column), item.value))

        for item in order_by or ():
            column = self._column(table, item.column)
            stmt = stmt.order_by(column.desc() if item.descending else column.asc())

        if limit is not None:
            stmt = stmt.limit(limit)

        try:
            rows = self.db.execute(stmt).mappings().all()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.warning("Select on %s failed: %s", collection, exc)
            raise DataStoreError(f"Select on {collection} failed", collection) from exc
        return [dict(row) for row in rows]

    def get(self, collection: str, record_id: str) -> Optional[Record]:
        rows = self.select(collection, filters=[Filter.eq("id", record_id)], limit=1)
        return rows[0] if rows else None

    def update(self, collection: str, record_id: str, patch: Record) -> Optional[Record]:
        self._guard_append_only(collection, "update")
        table = self._table(collection)
        values = self._clean(table, patch)
        values.pop("id", None)
        if not values:
            return self.get(collection, record_id)

        stmt = (
            update(table)
            .where(table.c.id == record_id)
            .values(**values)
            .returning(*table.c)
        )
        rows, _ = self._write(stmt, collection)
        return rows[0] if rows else None

    def delete(self, collection: str, record_id: str) -> bool:
        self._guard_append_only(collection, "delete")
        table = self._table(collection)
        _, rowcount = self._write(
            delete(table).where(table.c.id == record_id), collection, returning=False
        )
        return bool(rowcount)

