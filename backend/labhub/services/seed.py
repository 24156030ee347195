"""
Bootstrap of the first super admin.
"""
import logging

from labhub.core.security import get_password_hash
from labhub.gateway.base import PersistenceGateway
from labhub.models.profile import Profile, ProfileRole
from labhub.models.user import User

logger = logging.getLogger(__name__)


async def ensure_admin(gateway: PersistenceGateway, email: str, password: str, name: str) -> User:
    """
    Make sure ``email`` has a user and a super admin profile.

    An existing user keeps its password and name. A missing profile is
    created even when the user is already there, so a seed run that stopped
    between the two writes is finished on the next start.
    """
    email = email.lower()
    existing = await gateway.select(User, filters={"email": email}, order_by=None, limit=1)
    if existing:
        user = existing[0]
        logger.info(f"Admin user {email} already exists")
    else:
        user = await gateway.create(
            User,
            email=email,
            password_hash=get_password_hash(password),
            name=name,
        )
        logger.info(f"Created admin user {email}")

    if await gateway.get(Profile, user.id) is None:
        await gateway.create(
            Profile,
            id=user.id,
            email=email,
            full_name=user.name or name,
            role=ProfileRole.SUPER_ADMIN,
        )
        logger.info(f"Created super admin profile for {email}")
    return user
