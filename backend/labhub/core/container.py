"""
Service wiring.

Everything is built once at process start from settings and handed to the
API through ``app.state.services`` (or to the worker directly).
"""
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from labhub.core.config import Settings
from labhub.gateway import PersistenceGateway, SqlGateway, build_gateway
from labhub.services.access import AccessControl, parse_role
from labhub.services.activity import ActivityLogger
from labhub.services.auth import AuthService
from labhub.services.dashboard import DashboardService
from labhub.services.email_backends import EmailBackend, build_email_backend
from labhub.services.intake import SubmissionIntake
from labhub.services.notifications import NotificationDispatcher, NotificationQueue
from labhub.services.review import ReviewWorkflow
from labhub.services.seed import ensure_admin
from labhub.services.transitions import TRANSITION_POLICIES
from labhub.db.base import init_db


@dataclass
class Services:
    settings: Settings
    gateway: PersistenceGateway
    auth: AuthService
    access: AccessControl
    activity: ActivityLogger
    queue: NotificationQueue
    dispatcher: NotificationDispatcher
    intake: SubmissionIntake
    review: ReviewWorkflow
    dashboard: DashboardService

    async def startup(self) -> None:
        """Create tables (database store) and the seed admin if configured."""
        if isinstance(self.gateway, SqlGateway):
            await init_db(self.gateway.engine)
        if self.settings.SEED_ADMIN_EMAIL and self.settings.SEED_ADMIN_PASSWORD:
            await ensure_admin(
                self.gateway,
                self.settings.SEED_ADMIN_EMAIL,
                self.settings.SEED_ADMIN_PASSWORD,
                self.settings.SEED_ADMIN_NAME,
            )

    async def shutdown(self) -> None:
        await self.gateway.close()


def build_services(
    settings: Settings,
    gateway: Optional[PersistenceGateway] = None,
    email_backend: Optional[EmailBackend] = None,
) -> Services:
    gateway = gateway or build_gateway(settings)
    activity = ActivityLogger(gateway)

    auth = AuthService(gateway, settings)
    access = AccessControl(
        gateway,
        activity,
        role_allowlist=settings.ROLE_ALLOWLIST,
        default_role=parse_role(settings.DEFAULT_PROFILE_ROLE),
        faculty_can_review=settings.FACULTY_CAN_REVIEW,
    )
    auth.on_session_change(access.handle_session_change)

    queue = NotificationQueue(gateway, max_attempts=settings.EMAIL_MAX_ATTEMPTS)
    dispatcher = NotificationDispatcher(
        gateway,
        email_backend or build_email_backend(settings),
        retry_delay=timedelta(seconds=settings.EMAIL_RETRY_DELAY_SECONDS),
        stale_after=timedelta(seconds=settings.EMAIL_SENDING_TIMEOUT_SECONDS),
    )

    return Services(
        settings=settings,
        gateway=gateway,
        auth=auth,
        access=access,
        activity=activity,
        queue=queue,
        dispatcher=dispatcher,
        intake=SubmissionIntake(gateway, queue, site_url=settings.SITE_URL),
        review=ReviewWorkflow(
            gateway,
            access,
            queue,
            activity,
            transitions=TRANSITION_POLICIES[settings.REVIEW_TRANSITION_POLICY],
        ),
        dashboard=DashboardService(gateway),
    )
