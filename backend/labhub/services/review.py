"""
Review workflow for project submissions.

``review`` is the only write path for a submission after intake. Order of
operations:

1. gate the reviewer's role
2. validate the requested status and the comments it requires
3. load the submission and check the transition policy / expected version
4. write status, comments, reviewer and timestamps in one update
5. append the activity log entry and queue the student's email

Steps 1-3 reject before anything is written. Step 5 is best-effort and
never undoes step 4.
"""
import logging
from typing import Optional

from labhub.core.exceptions import ConflictError, NotFoundError, ValidationError
from labhub.gateway.base import PersistenceGateway
from labhub.models.base import utcnow
from labhub.models.profile import Profile
from labhub.models.submission import Submission, SubmissionStatus, DECISION_STATUSES
from labhub.services import email_templates
from labhub.services.access import AccessControl
from labhub.services.activity import ActivityLogger
from labhub.services.notifications import NotificationQueue
from labhub.services.transitions import PERMISSIVE_TRANSITIONS, can_transition

logger = logging.getLogger(__name__)


def parse_status(value) -> SubmissionStatus:
    if isinstance(value, SubmissionStatus):
        return value
    try:
        return SubmissionStatus(value)
    except ValueError:
        raise ValidationError(f"Invalid status: {value}", {"status": "Unknown status"})


class ReviewWorkflow:

    def __init__(
        self,
        gateway: PersistenceGateway,
        access: AccessControl,
        queue: NotificationQueue,
        activity: ActivityLogger,
        transitions: Optional[dict[SubmissionStatus, list[SubmissionStatus]]] = None,
    ):
        self.gateway = gateway
        self.access = access
        self.queue = queue
        self.activity = activity
        self.transitions = transitions or PERMISSIVE_TRANSITIONS

    async def review(
        self,
        submission_id: str,
        new_status,
        comments: Optional[str],
        reviewer: Profile,
        expected_version: Optional[int] = None,
    ) -> Submission:
        self.access.require_reviewer(reviewer)

        status = parse_status(new_status)
        comments = (comments or "").strip() or None
        if status in DECISION_STATUSES and not comments:
            raise ValidationError(
                "Please add comments before submitting",
                {"comments": f"Comments are required when a project is {status.value}"},
            )

        submission = await self.gateway.get(Submission, submission_id)
        if submission is None:
            raise NotFoundError("Submission not found")
        if not can_transition(self.transitions, submission.status, status):
            raise ConflictError(
                f"Cannot move a submission from {submission.status.value} to {status.value}"
            )
        if expected_version is not None and expected_version != submission.version:
            raise ConflictError("Submission was changed by another reviewer; reload and try again")

        now = utcnow()
        updated = await self.gateway.update(
            Submission,
            submission_id,
            status=status,
            faculty_comments=comments,
            reviewed_by=reviewer.id,
            reviewed_at=now,
            updated=now,
            version=submission.version + 1,
        )
        if updated is None:
            raise NotFoundError("Submission not found")
        logger.info(f"Submission {submission_id} set to {status.value} by {reviewer.email}")

        await self.activity.record(
            admin_id=reviewer.id,
            action=f"Updated project status to {status.value}",
            entity_type="project",
            entity_id=submission_id,
            details={"status": status.value, "comments": comments},
        )
        await self.queue.enqueue(email_templates.status_update(
            student_email=updated.student_email,
            student_name=updated.student_name,
            project_title=updated.project_title,
            status=status,
            comments=comments,
        ))
        return updated
