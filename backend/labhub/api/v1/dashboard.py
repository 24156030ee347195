"""
Dashboard summary endpoint.

Provides the counts shown at the top of the review screen.
"""
from fastapi import APIRouter, Depends

from labhub.core.container import Services
from labhub.core.deps import get_reviewer, get_services
from labhub.models.email_queue import EmailQueueEntry, EmailStatus
from labhub.models.profile import Profile
from labhub.schemas.dashboard import DashboardSummaryResponse

router = APIRouter()


@router.get("/summary", response_model=DashboardSummaryResponse)
async def get_dashboard_summary(
    services: Services = Depends(get_services),
    reviewer: Profile = Depends(get_reviewer),
):
    """
    Get the dashboard summary.

    Returns submission counts by status plus the number of emails still
    queued and the number that failed permanently.
    """
    submissions = await services.dashboard.list_submissions()
    queued = await services.gateway.select(
        EmailQueueEntry, filters={"status": EmailStatus.PENDING}, order_by=None
    )
    failed = await services.gateway.select(
        EmailQueueEntry, filters={"status": EmailStatus.FAILED}, order_by=None
    )
    return DashboardSummaryResponse(
        stats=services.dashboard.summarize(submissions),
        user_role=reviewer.role.value,
        queued_emails=len(queued),
        failed_emails=len(failed),
    )
