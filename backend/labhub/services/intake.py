"""
Submission intake.

Validates a student's project proposal, stores it as ``pending`` and queues
the confirmation email. The stored submission never depends on the emails:
a queuing failure is logged and the submission stands.
"""
import logging
from typing import Any, Mapping, Union

import pydantic

from labhub.core.exceptions import ValidationError
from labhub.gateway.base import PersistenceGateway
from labhub.models.profile import Profile
from labhub.models.submission import Submission, SubmissionStatus
from labhub.services import email_templates
from labhub.services.access import ADMIN_ROLES
from labhub.services.notifications import NotificationQueue
from labhub.schemas.submission import SubmissionCreate

logger = logging.getLogger(__name__)


def field_errors(exc: pydantic.ValidationError) -> dict[str, str]:
    """Flatten pydantic errors into ``{field: message}``."""
    errors: dict[str, str] = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "__root__"
        errors.setdefault(field, error["msg"])
    return errors


def parse_form(form: Union[SubmissionCreate, Mapping[str, Any]]) -> SubmissionCreate:
    if isinstance(form, SubmissionCreate):
        return form
    try:
        return SubmissionCreate.model_validate(dict(form))
    except pydantic.ValidationError as e:
        raise ValidationError("Submission is invalid", field_errors(e)) from e


class SubmissionIntake:

    def __init__(self, gateway: PersistenceGateway, queue: NotificationQueue, site_url: str):
        self.gateway = gateway
        self.queue = queue
        self.site_url = site_url

    async def submit(self, form: Union[SubmissionCreate, Mapping[str, Any]]) -> Submission:
        data = parse_form(form)

        submission = await self.gateway.create(
            Submission,
            student_name=data.student_name,
            student_email=str(data.student_email),
            roll_number=data.roll_number,
            branch=data.branch,
            year=data.year,
            contact_number=data.contact_number,
            is_team_project=data.is_team_project,
            team_size=data.team_size,
            team_members=data.team_members,
            category=data.category,
            project_title=data.project_title,
            description=data.description,
            expected_outcomes=data.expected_outcomes,
            duration=data.duration,
            required_resources=list(data.required_resources),
            other_resources=data.other_resources,
            status=SubmissionStatus.PENDING,
        )
        logger.info(f"Submission {submission.id} received from {submission.student_email}")

        await self.queue.enqueue(email_templates.project_confirmation(
            student_email=submission.student_email,
            student_name=submission.student_name,
            project_title=submission.project_title,
            submission_id=submission.id,
            submitted_at=submission.created,
        ))
        await self._notify_admins(submission)
        return submission

    async def _notify_admins(self, submission: Submission) -> None:
        try:
            profiles = await self.gateway.select(Profile, order_by=None)
        except Exception as e:
            logger.error(f"Could not load admin profiles for submission {submission.id}: {e}")
            return

        for profile in profiles:
            if profile.role not in ADMIN_ROLES or not profile.wants_email("email_on_new_project"):
                continue
            await self.queue.enqueue(email_templates.new_project_for_admin(
                admin_email=profile.email,
                admin_name=profile.full_name or profile.email,
                project_title=submission.project_title,
                student_name=submission.student_name,
                category=submission.category.value,
                site_url=self.site_url,
            ))
