"""
Dashboard aggregation.

Read-only views over the current submission set; nothing is cached, so
callers re-fetch to see review changes.
"""
from dataclasses import dataclass
from typing import Iterable, Optional

from labhub.core.exceptions import NotFoundError
from labhub.gateway.base import PersistenceGateway
from labhub.models.submission import Submission, SubmissionStatus
from labhub.schemas.dashboard import SubmissionStats
from labhub.services.review import parse_status


@dataclass
class SubmissionFilter:
    status: Optional[str] = None
    search: Optional[str] = None


def matches_search(submission: Submission, search: str) -> bool:
    needle = search.strip().lower()
    if not needle:
        return True
    haystack = (
        submission.project_title,
        submission.student_name,
        submission.roll_number,
        submission.student_email,
    )
    return any(needle in (value or "").lower() for value in haystack)


class DashboardService:

    def __init__(self, gateway: PersistenceGateway):
        self.gateway = gateway

    async def list_submissions(self, filter: Optional[SubmissionFilter] = None) -> list[Submission]:
        """Submissions newest first, narrowed by status and free-text search."""
        filters = {}
        if filter and filter.status:
            filters["status"] = parse_status(filter.status)

        submissions = await self.gateway.select(Submission, filters=filters, order_by="created", descending=True)
        if filter and filter.search:
            submissions = [s for s in submissions if matches_search(s, filter.search)]
        return submissions

    async def get_submission(self, submission_id: str) -> Submission:
        submission = await self.gateway.get(Submission, submission_id)
        if submission is None:
            raise NotFoundError("Submission not found")
        return submission

    @staticmethod
    def summarize(submissions: Iterable[Submission]) -> SubmissionStats:
        counts = {status: 0 for status in SubmissionStatus}
        total = 0
        for submission in submissions:
            total += 1
            counts[submission.status] += 1
        return SubmissionStats(
            total=total,
            pending=counts[SubmissionStatus.PENDING],
            under_review=counts[SubmissionStatus.UNDER_REVIEW],
            approved=counts[SubmissionStatus.APPROVED],
            rejected=counts[SubmissionStatus.REJECTED],
            completed=counts[SubmissionStatus.COMPLETED],
        )
