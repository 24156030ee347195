"""
Activity log model.

Append-only audit trail of privileged mutations.
"""
from typing import Optional
from sqlalchemy import String, ForeignKey, JSON
from sqlalchemy.orm import Mapped, mapped_column
from labhub.models.base import BaseModel


class ActivityLog(BaseModel):
    """One privileged action taken by an admin."""
    __tablename__ = "activity_logs"

    admin_id: Mapped[Optional[str]] = mapped_column(
        String(15),
        ForeignKey("profiles.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    action: Mapped[str] = mapped_column(String(300), nullable=False)
    entity_type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    entity_id: Mapped[Optional[str]] = mapped_column(String(15), nullable=True, index=True)
    details: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)

    def __repr__(self) -> str:
        return f"<ActivityLog {self.action} on {self.entity_type}:{self.entity_id}>"
