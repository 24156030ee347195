"""
SQLAlchemy models for LabHub.

- Auth: users and their back-office profiles
- Review: project submissions
- Notifications: the outbound email queue
- Audit: activity log
"""
from labhub.models.user import User
from labhub.models.profile import Profile, ProfileRole
from labhub.models.submission import (
    Submission,
    SubmissionStatus,
    Branch,
    StudyYear,
    ProjectCategory,
    ProjectDuration,
    RESOURCE_CATALOG,
)
from labhub.models.email_queue import EmailQueueEntry, EmailStatus
from labhub.models.activity_log import ActivityLog

__all__ = [
    # Auth
    "User",
    "Profile",
    "ProfileRole",
    # Review
    "Submission",
    "SubmissionStatus",
    "Branch",
    "StudyYear",
    "ProjectCategory",
    "ProjectDuration",
    "RESOURCE_CATALOG",
    # Notifications
    "EmailQueueEntry",
    "EmailStatus",
    # Audit
    "ActivityLog",
]
