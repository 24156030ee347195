"""
Email queue model.

Every outbound email is written here before any delivery attempt and the
row is kept afterwards as an audit trail.
"""
from typing import Optional
from datetime import datetime
from sqlalchemy import String, Text, Integer, DateTime, Enum, JSON
from sqlalchemy.orm import Mapped, mapped_column
import enum
from labhub.models.base import BaseModel, utcnow


DEFAULT_MAX_ATTEMPTS = 3


class EmailStatus(str, enum.Enum):
    """Delivery status of a queued email."""
    PENDING = "pending"
    SENDING = "sending"
    SENT = "sent"
    FAILED = "failed"


TERMINAL_EMAIL_STATUSES = (EmailStatus.SENT, EmailStatus.FAILED)


class EmailQueueEntry(BaseModel):
    """Queued email notification."""
    __tablename__ = "email_queue"

    to_email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    to_name: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    subject: Mapped[str] = mapped_column(String(300), nullable=False)
    body_html: Mapped[str] = mapped_column(Text, nullable=False)
    body_text: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    template_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    template_data: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)

    status: Mapped[EmailStatus] = mapped_column(
        Enum(EmailStatus, name="emailstatus", values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=EmailStatus.PENDING,
        index=True
    )
    attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    max_attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=DEFAULT_MAX_ATTEMPTS)
    error_message: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    scheduled_for: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        index=True
    )
    sent_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_EMAIL_STATUSES

    def __repr__(self) -> str:
        return f"<EmailQueueEntry {self.subject!r} to {self.to_email} ({self.status.value})>"
