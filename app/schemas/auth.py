"""
Authentication schemas for the Waqf Portal admin panel.
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class LoginRequest(BaseModel):
    """Email/password login against Supabase Auth."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class UserRead(BaseModel):
    id: str
    email: Optional[str] = None
    is_admin: bool = False


class SessionResponse(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = "bearer"
    expires_at: Optional[datetime] = None
    user: UserRead


class LogoutResponse(BaseModel):
    success: bool = True
