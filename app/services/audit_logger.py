"""
Admin activity log.

Mutation sites describe what they did with an ``AuditEntry``; the logger
stamps the actor from the injected identity provider and appends one row to
``admin_logs``. Writing is best effort: the content change it describes has
already been committed, so no audit failure is allowed to reach the caller.
"""
from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from fastapi import BackgroundTasks

from app.core.config import settings
from app.models.base import new_id
from app.schemas.activity_log import (
    ActivityLogEntry,
    ActivityStatRow,
    AdminAction,
    AuditEntry,
)
from app.services.data_store import DataStore, DataStoreError, Filter, OrderBy
from app.services.identity import IdentityProvider

logger = logging.getLogger(__name__)

STAT_COLUMNS = ("id", "created_at", "action", "table_name")


class DetachedAuditWrite:
    """Completion handle for an audit write scheduled after the response."""

    def __init__(self):
        self._event = threading.Event()
        self.result: Optional[ActivityLogEntry] = None

    @property
    def done(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        return self._event.wait(timeout)

    def _finish(self, result: Optional[ActivityLogEntry]) -> None:
        self.result = result
        self._event.set()


class AuditLogger:
    """
    Append-only writer and reader for the admin activity log.

    There is no update or delete method; the data store also refuses both
    on the log collection.
    """

    def __init__(
        self,
        store: DataStore,
        identity: IdentityProvider,
        collection: Optional[str] = None,
    ):
        self.store = store
        self.identity = identity
        self.collection = collection or settings.AUDIT_LOG_TABLE

    def record(self, entry: AuditEntry) -> Optional[ActivityLogEntry]:
        """
        Append one entry for the current actor.

        Returns the stored entry, or None when nothing was written.
        """
        try:
            user = self.identity.get_current_user()
        except Exception as exc:
            logger.warning(
                "Audit entry dropped, actor lookup failed | action=%s | table=%s | error=%s",
                entry.action.value,
                entry.target_table,
                exc,
            )
            return None
        if user is None:
            logger.warning(
                "Audit entry dropped, no authenticated actor | action=%s | table=%s",
                entry.action.value,
                entry.target_table,
            )
            return None

        try:
            row = {
                "id": new_id(),
                "created_at": datetime.now(timezone.utc),
                "user_id": user.id,
                "user_email": user.email or "unknown",
                "action": entry.action.value,
                "table_name": entry.target_table,
                "record_id": entry.target_record_id,
                "old_data": entry.old_payload.as_data() if entry.old_payload else None,
                "new_data": entry.new_payload.as_data() if entry.new_payload else None,
                "description": entry.description,
            }
            stored = self.store.insert(self.collection, row)
        except Exception as exc:
            # Audit failure must not undo or fail the mutation it describes.
            logger.error(
                "Audit write failed | action=%s | table=%s | record_id=%s | error=%s",
                entry.action.value,
                entry.target_table,
                entry.target_record_id,
                exc,
            )
            return None

        logger.info(
            "Audit entry recorded | action=%s | table=%s | record_id=%s",
            entry.action.value,
            entry.target_table,
            entry.target_record_id,
        )
        return ActivityLogEntry.from_row(stored)

    def _record_detached(self, entry: AuditEntry, handle: DetachedAuditWrite) -> None:
        result = None
        try:
            result = self.record(entry)
        except Exception:
            logger.exception(
                "Detached audit write crashed | action=%s | table=%s",
                entry.action.value,
                entry.target_table,
            )
        finally:
            handle._finish(result)

    def spawn(self, entry: AuditEntry, background_tasks: BackgroundTasks) -> DetachedAuditWrite:
        """Schedule ``record`` to run after the response has been sent."""
        handle = DetachedAuditWrite()
        background_tasks.add_task(self._record_detached, entry, handle)
        return handle

    def list(self, limit: int = 100) -> List[ActivityLogEntry]:
        """Most recent entries, newest first, at most ``limit`` of them."""
        if limit < 1:
            return []
        limit = min(limit, settings.AUDIT_LOG_MAX_LIMIT)
        rows = self.store.select(
            self.collection,
            order_by=[OrderBy("created_at", descending=True)],
            limit=limit,
        )
        return [ActivityLogEntry.from_row(row) for row in rows]

    def stats_since(self, window_start: datetime) -> List[ActivityStatRow]:
        """Payload-free rows created at or after ``window_start``, oldest first."""
        if window_start.tzinfo is not None:
            window_start = window_start.astimezone(timezone.utc)
        rows = self.store.select(
            self.collection,
            filters=[Filter.gte("created_at", window_start)],
            order_by=[OrderBy("created_at")],
            columns=list(STAT_COLUMNS),
        )
        return [ActivityStatRow.from_row(row) for row in rows]


def filter_entries(
    entries: Iterable[ActivityLogEntry],
    action: Optional[AdminAction] = None,
    table: Optional[str] = None,
) -> List[ActivityLogEntry]:
    return [
        entry
        for entry in entries
        if (action is None or entry.action == action)
        and (table is None or entry.target_table == table)
    ]
