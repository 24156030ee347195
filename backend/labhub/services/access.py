"""Role resolution and gates for back-office operations."""
import logging
from typing import Optional

from labhub.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from labhub.gateway.base import PersistenceGateway
from labhub.models.profile import Profile, ProfileRole, role_rank
from labhub.services.activity import ActivityLogger
from labhub.services.auth import AuthSession, SIGNED_IN

logger = logging.getLogger(__name__)

ADMIN_ROLES = (ProfileRole.SUPER_ADMIN, ProfileRole.ADMIN)


def parse_role(value: str) -> ProfileRole:
    try:
        return ProfileRole(value)
    except ValueError:
        raise ValidationError(f"Invalid role: {value}", {"role": "Unknown role"})


class AccessControl:
    """
    Resolves sessions to profiles and gates mutations by role.

    New principals get the role listed for their email in ``role_allowlist``
    and ``default_role`` otherwise. Nobody becomes an admin just by signing in.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        activity: ActivityLogger,
        role_allowlist: Optional[dict[str, str]] = None,
        default_role: ProfileRole = ProfileRole.VIEW_ONLY,
        faculty_can_review: bool = False,
    ):
        self.gateway = gateway
        self.activity = activity
        self.role_allowlist = {
            email.lower(): parse_role(role) for email, role in (role_allowlist or {}).items()
        }
        self.default_role = default_role
        self.faculty_can_review = faculty_can_review

    def initial_role(self, email: str) -> ProfileRole:
        return self.role_allowlist.get(email.lower(), self.default_role)

    async def resolve_profile(self, session: AuthSession) -> Profile:
        """Profile for ``session``, created on first access."""
        profile = await self.gateway.get(Profile, session.user_id)
        if profile is not None:
            return profile

        role = self.initial_role(session.email)
        profile = await self.gateway.create(
            Profile,
            id=session.user_id,
            email=session.email,
            full_name=session.name or session.email.split("@")[0],
            role=role,
        )
        logger.info(f"Created profile for {session.email} with role {role.value}")
        return profile

    async def handle_session_change(self, event: str, session: Optional[AuthSession]) -> None:
        if event == SIGNED_IN and session is not None:
            await self.resolve_profile(session)

    @staticmethod
    def is_admin(profile: Optional[Profile]) -> bool:
        if profile is None:
            return False
        return profile.role in ADMIN_ROLES

    def can_review(self, profile: Optional[Profile]) -> bool:
        if self.is_admin(profile):
            return True
        return self.faculty_can_review and profile is not None and profile.role == ProfileRole.FACULTY

    def require_reviewer(self, profile: Optional[Profile]) -> Profile:
        if not self.can_review(profile):
            raise AuthorizationError("Insufficient role to review submissions")
        return profile

    def require_admin(self, profile: Optional[Profile]) -> Profile:
        if not self.is_admin(profile):
            raise AuthorizationError("Admin access required")
        return profile

    def require_min_role(self, profile: Optional[Profile], minimum: ProfileRole) -> Profile:
        if profile is None or role_rank(profile.role) < role_rank(minimum):
            raise AuthorizationError("Insufficient role")
        return profile

    async def assign_role(self, actor: Profile, profile_id: str, role: str) -> Profile:
        """Change a profile's role. Super admins only."""
        self.require_min_role(actor, ProfileRole.SUPER_ADMIN)
        new_role = parse_role(role)

        target = await self.gateway.get(Profile, profile_id)
        if target is None:
            raise NotFoundError("Profile not found")
        if target.id == actor.id and new_role != ProfileRole.SUPER_ADMIN:
            raise ValidationError("Super admins cannot demote themselves", {"role": "Cannot demote yourself"})

        previous = target.role
        updated = await self.gateway.update(Profile, profile_id, role=new_role)
        await self.activity.record(
            admin_id=actor.id,
            action=f"Changed role to {new_role.value}",
            entity_type="profile",
            entity_id=profile_id,
            details={"previous_role": previous.value, "role": new_role.value},
        )
        return updated
