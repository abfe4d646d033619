"""
Identity provider used by the audit logger and the admin gate.

A provider is built per request from the bearer token and handed to the
code that needs it; nothing reads the "current user" from global state.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional, Protocol

from app.services.data_store import DataStore, DataStoreError, Filter
from app.services.supabase_auth import AuthError, decode_supabase_token

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CurrentUser:
    id: str
    email: Optional[str] = None


@dataclass(frozen=True)
class AuthSession:
    access_token: str
    user: CurrentUser
    expires_at: Optional[datetime] = None
    role: Optional[str] = None


class IdentityProvider(Protocol):
    def get_current_user(self) -> Optional[CurrentUser]: ...

    def get_session(self) -> Optional[AuthSession]: ...

    def has_role(self, user_id: str, role: str) -> bool: ...


class SupabaseIdentityProvider:
    """Resolves identity from a Supabase access token; roles from ``user_roles``."""

    def __init__(
        self,
        access_token: Optional[str],
        store: DataStore,
        decoder: Callable[[str], dict] = decode_supabase_token,
    ):
        self._access_token = access_token
        self._store = store
        self._decoder = decoder
        self._session: Optional[AuthSession] = None
        self._resolved = False

    def _resolve(self) -> Optional[AuthSession]:
        if self._resolved:
            return self._session
        self._resolved = True

        if not self._access_token:
            return None
        try:
            payload = self._decoder(self._access_token)
        except AuthError as exc:
            logger.info("Identity not resolved: %s", exc.message)
            return None

        exp = payload.get("exp")
        self._session = AuthSession(
            access_token=self._access_token,
            user=CurrentUser(id=str(payload["sub"]), email=payload.get("email")),
            expires_at=datetime.fromtimestamp(exp, tz=timezone.utc) if exp else None,
            role=payload.get("role"),
        )
        return self._session

    def get_session(self) -> Optional[AuthSession]:
        return self._resolve()

    def get_current_user(self) -> Optional[CurrentUser]:
        session = self._resolve()
        return session.user if session else None

    def has_role(self, user_id: str, role: str) -> bool:
        try:
            rows = self._store.select(
                "user_roles",
                filters=[Filter.eq("user_id", user_id), Filter.eq("role", role)],
                limit=1,
                columns=["role"],
            )
        except DataStoreError as exc:
            logger.error("Role lookup failed for %s: %s", user_id, exc.message)
            return False
        return bool(rows)
