"""
Admin endpoints.

Endpoints:
- GET /api/v1/admin/notifications - Email queue (audit trail)
- POST /api/v1/admin/notifications/dispatch - Deliver due emails now
- GET /api/v1/admin/activity-logs - Activity log
- PATCH /api/v1/admin/profiles/{id}/role - Change a profile's role (super admin)
"""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status

from labhub.core.container import Services
from labhub.core.deps import get_admin, get_services
from labhub.models.email_queue import EmailQueueEntry, EmailStatus
from labhub.models.activity_log import ActivityLog
from labhub.models.profile import Profile
from labhub.schemas.activity_log import ActivityLogResponse
from labhub.schemas.auth import ProfileResponse, RoleUpdate
from labhub.schemas.notification import DispatchResponse, EmailQueueResponse
from labhub.api.v1.auth import profile_to_response

router = APIRouter()


def email_to_response(e: EmailQueueEntry) -> EmailQueueResponse:
    return EmailQueueResponse(
        id=e.id,
        to_email=e.to_email,
        to_name=e.to_name,
        subject=e.subject,
        template_name=e.template_name,
        status=e.status.value,
        attempts=e.attempts,
        max_attempts=e.max_attempts,
        error_message=e.error_message,
        scheduled_for=e.scheduled_for,
        sent_at=e.sent_at,
        created=e.created,
        updated=e.updated,
    )


def activity_to_response(a: ActivityLog) -> ActivityLogResponse:
    return ActivityLogResponse(
        id=a.id,
        admin_id=a.admin_id,
        action=a.action,
        entity_type=a.entity_type,
        entity_id=a.entity_id,
        details=a.details,
        created=a.created,
    )


@router.get("/notifications", response_model=list[EmailQueueResponse])
async def list_notifications(
    status_filter: Optional[str] = Query(None, alias="status"),
    services: Services = Depends(get_services),
    admin: Profile = Depends(get_admin),
):
    filters = {}
    if status_filter:
        try:
            filters["status"] = EmailStatus(status_filter)
        except ValueError:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Invalid status: {status_filter}")
    entries = await services.gateway.select(EmailQueueEntry, filters=filters)
    return [email_to_response(e) for e in entries]


@router.post("/notifications/dispatch", response_model=DispatchResponse)
async def dispatch_notifications(
    limit: Optional[int] = Query(None, ge=1, le=500),
    services: Services = Depends(get_services),
    admin: Profile = Depends(get_admin),
):
    """Deliver every queued email that is due."""
    report = await services.dispatcher.drain(limit=limit)
    return DispatchResponse(
        attempted=report.attempted,
        sent=report.sent,
        retrying=report.retrying,
        failed=report.failed,
    )


@router.get("/activity-logs", response_model=list[ActivityLogResponse])
async def list_activity_logs(
    entity_type: Optional[str] = None,
    entity_id: Optional[str] = None,
    services: Services = Depends(get_services),
    admin: Profile = Depends(get_admin),
):
    entries = await services.activity.list(entity_type=entity_type, entity_id=entity_id)
    return [activity_to_response(a) for a in entries]


@router.patch("/profiles/{profile_id}/role", response_model=ProfileResponse)
async def update_profile_role(
    profile_id: str,
    data: RoleUpdate,
    services: Services = Depends(get_services),
    admin: Profile = Depends(get_admin),
):
    """Change a profile's role. Super admins only."""
    profile = await services.access.assign_role(admin, profile_id, data.role)
    return profile_to_response(profile, services)
