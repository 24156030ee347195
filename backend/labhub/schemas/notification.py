"""
Email queue schemas.
"""
from typing import Optional
from datetime import datetime
from pydantic import BaseModel


class EmailQueueResponse(BaseModel):
    """Queued email record (audit view)."""
    id: str
    to_email: str
    to_name: Optional[str] = None
    subject: str
    template_name: Optional[str] = None
    status: str
    attempts: int
    max_attempts: int
    error_message: Optional[str] = None
    scheduled_for: datetime
    sent_at: Optional[datetime] = None
    created: datetime
    updated: datetime


class DispatchResponse(BaseModel):
    """Outcome of one drain of the email queue."""
    attempted: int
    sent: int
    retrying: int
    failed: int
