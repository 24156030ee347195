"""
Dashboard schemas.
"""
from pydantic import BaseModel


class SubmissionStats(BaseModel):
    """Counts of submissions by status."""
    total: int = 0
    pending: int = 0
    under_review: int = 0
    approved: int = 0
    rejected: int = 0
    completed: int = 0


class DashboardSummaryResponse(BaseModel):
    """Dashboard header for the review screen."""
    stats: SubmissionStats
    user_role: str
    queued_emails: int
    failed_emails: int
