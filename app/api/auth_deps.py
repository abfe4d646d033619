"""Supabase JWT authentication dependencies."""
import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.api import deps
from app.core.config import settings
from app.services.audit_logger import AuditLogger
from app.services.data_store import SqlDataStore
from app.services.identity import CurrentUser, SupabaseIdentityProvider

security = HTTPBearer(auto_error=False)
logger = logging.getLogger(__name__)


def get_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    store: SqlDataStore = Depends(deps.get_data_store),
) -> SupabaseIdentityProvider:
    token = credentials.credentials if credentials else None
    return SupabaseIdentityProvider(token, store)


def get_audit_logger(
    store: SqlDataStore = Depends(deps.get_data_store),
    identity: SupabaseIdentityProvider = Depends(get_identity),
) -> AuditLogger:
    return AuditLogger(store, identity)


def get_current_user(
    request: Request,
    identity: SupabaseIdentityProvider = Depends(get_identity),
) -> CurrentUser:
    request_id = getattr(request.state, "request_id", None)
    user = identity.get_current_user()
    if user is None:
        logger.warning(
            "Auth failed | id=%s | method=%s | path=%s",
            request_id,
            request.method,
            request.url.path,
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token tidak valid atau tidak ada",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def require_admin(
    request: Request,
    user: CurrentUser = Depends(get_current_user),
    identity: SupabaseIdentityProvider = Depends(get_identity),
) -> CurrentUser:
    if not identity.has_role(user.id, settings.ADMIN_ROLE):
        logger.warning(
            "Admin access denied | id=%s | user_id=%s | path=%s",
            getattr(request.state, "request_id", None),
            user.id,
            request.url.path,
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Akses admin diperlukan",
        )
    return user
