"""
Authentication and profile schemas.
"""
from typing import Optional
from pydantic import BaseModel, EmailStr
from datetime import datetime


class SignInRequest(BaseModel):
    """Email/password sign-in."""
    email: EmailStr
    password: str


class ProfileResponse(BaseModel):
    """Back-office profile of the signed-in principal."""
    id: str
    email: str
    full_name: Optional[str] = None
    role: str
    is_admin: bool = False
    can_review: bool = False
    notification_preferences: Optional[dict] = None
    created: datetime
    updated: datetime

    class Config:
        from_attributes = True


class SessionResponse(BaseModel):
    """Active session."""
    access_token: str
    token_type: str = "bearer"
    user_id: str
    email: str
    expires_at: datetime


class SignInResponse(BaseModel):
    """Session plus the resolved profile."""
    session: SessionResponse
    profile: ProfileResponse


class RoleUpdate(BaseModel):
    """Administrative role change."""
    role: str
