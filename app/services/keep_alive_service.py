"""Database keep-alive ping and its history."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from app.services.data_store import DataStore, DataStoreError, OrderBy, Record

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 50


@dataclass
class PingResult:
    success: bool
    timestamp: datetime
    message: Optional[str] = None
    error: Optional[str] = None


def ping(store: DataStore) -> PingResult:
    """Run a trivial query and record the outcome in ``keep_alive_logs``."""
    timestamp = datetime.now(timezone.utc)
    try:
        store.select("profil", columns=["id"], limit=1)
    except DataStoreError as exc:
        logger.error("Keep-alive query error: %s", exc.message)
        _log(store, "error", exc.message, timestamp)
        return PingResult(success=False, timestamp=timestamp, error=exc.message)

    _log(store, "success", "Database keep-alive ping successful", timestamp)
    logger.info("Keep-alive successful: %s", timestamp.isoformat())
    return PingResult(
        success=True, timestamp=timestamp, message="Database keep-alive successful"
    )


def _log(store: DataStore, status: str, message: str, timestamp: datetime) -> None:
    try:
        store.insert(
            "keep_alive_logs",
            {"status": status, "message": message, "timestamp": timestamp},
        )
    except DataStoreError as exc:
        logger.error("Keep-alive log write failed: %s", exc.message)


def history(store: DataStore, limit: int = HISTORY_LIMIT) -> List[Record]:
    return store.select(
        "keep_alive_logs",
        order_by=[OrderBy("timestamp", descending=True)],
        limit=limit,
    )
