"""
Authentication API routes for the Waqf Portal admin panel.

Sessions are issued by Supabase Auth; these endpoints proxy the password
grant and logout and record LOGIN / LOGOUT in the activity log.
"""
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status

from app.api import deps
from app.api.auth_deps import get_audit_logger, get_current_user, get_identity
from app.core.config import settings
from app.schemas.activity_log import AdminAction, AuditEntry
from app.schemas.auth import LoginRequest, LogoutResponse, SessionResponse, UserRead
from app.schemas.error import ERROR_RESPONSES
from app.services.audit_logger import AuditLogger
from app.services.data_store import SqlDataStore
from app.services.identity import CurrentUser, SupabaseIdentityProvider
from app.services.supabase_auth import AuthError, sign_in_with_password, sign_out

router = APIRouter(tags=["auth"])
logger = logging.getLogger(__name__)


@router.post("/login", response_model=SessionResponse, responses=ERROR_RESPONSES)
def login(
    body: LoginRequest,
    background_tasks: BackgroundTasks,
    store: SqlDataStore = Depends(deps.get_data_store),
):
    try:
        session = sign_in_with_password(body.email, body.password)
    except AuthError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.message)

    identity = SupabaseIdentityProvider(session["access_token"], store)
    user = identity.get_current_user()
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Respons autentikasi tidak valid",
        )

    AuditLogger(store, identity).spawn(
        AuditEntry.session_event(AdminAction.LOGIN, f"Login: {user.email or user.id}"),
        background_tasks,
    )

    expires_at = session.get("expires_at")
    return SessionResponse(
        access_token=session["access_token"],
        refresh_token=session.get("refresh_token"),
        token_type=session.get("token_type", "bearer"),
        expires_at=datetime.fromtimestamp(expires_at, tz=timezone.utc) if expires_at else None,
        user=UserRead(
            id=user.id,
            email=user.email,
            is_admin=identity.has_role(user.id, settings.ADMIN_ROLE),
        ),
    )


@router.post("/logout", response_model=LogoutResponse, responses=ERROR_RESPONSES)
def logout(
    background_tasks: BackgroundTasks,
    user: CurrentUser = Depends(get_current_user),
    identity: SupabaseIdentityProvider = Depends(get_identity),
    audit: AuditLogger = Depends(get_audit_logger),
):
    # Recorded before revocation; the actor comes from the still-valid token
    audit.spawn(
        AuditEntry.session_event(AdminAction.LOGOUT, f"Logout: {user.email or user.id}"),
        background_tasks,
    )
    session = identity.get_session()
    try:
        sign_out(session.access_token)
    except AuthError as exc:
        logger.warning("Sign-out skipped | user_id=%s | reason=%s", user.id, exc.message)
    return LogoutResponse(success=True)


@router.get("/me", response_model=UserRead, responses=ERROR_RESPONSES)
def me(
    user: CurrentUser = Depends(get_current_user),
    identity: SupabaseIdentityProvider = Depends(get_identity),
):
    return UserRead(
        id=user.id,
        email=user.email,
        is_admin=identity.has_role(user.id, settings.ADMIN_ROLE),
    )
