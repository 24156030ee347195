"""
Profile model.
"""
from typing import Optional
from sqlalchemy import String, Enum, JSON
from sqlalchemy.orm import Mapped, mapped_column
import enum
from labhub.models.base import BaseModel


class ProfileRole(str, enum.Enum):
    """Back-office roles, most privileged first."""
    SUPER_ADMIN = "super_admin"
    ADMIN = "admin"
    FACULTY = "faculty"
    VIEW_ONLY = "view_only"


ROLE_ORDER = [ProfileRole.VIEW_ONLY, ProfileRole.FACULTY, ProfileRole.ADMIN, ProfileRole.SUPER_ADMIN]


def role_rank(role: ProfileRole) -> int:
    return ROLE_ORDER.index(role)


def default_notification_preferences() -> dict:
    return {
        "email_on_new_project": True,
    }


class Profile(BaseModel):
    """Back-office profile, bound 1:1 to a user (same id)."""
    __tablename__ = "profiles"

    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    full_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    role: Mapped[ProfileRole] = mapped_column(
        Enum(ProfileRole, name="profilerole", values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=ProfileRole.VIEW_ONLY,
        index=True
    )

    notification_preferences: Mapped[Optional[dict]] = mapped_column(
        JSON,
        nullable=True,
        default=default_notification_preferences
    )

    def wants_email(self, key: str) -> bool:
        prefs = self.notification_preferences or {}
        return bool(prefs.get(key, False))

    def __repr__(self) -> str:
        return f"<Profile {self.email} as {self.role}>"
