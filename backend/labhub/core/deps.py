"""
FastAPI dependencies: services, current session and current profile.
"""
from typing import Optional
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from labhub.core.container import Services
from labhub.models.profile import Profile
from labhub.services.auth import AuthSession

bearer_scheme = HTTPBearer(auto_error=False)


def get_services(request: Request) -> Services:
    """Services built at startup."""
    return request.app.state.services


async def get_current_session_optional(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    services: Services = Depends(get_services),
) -> Optional[AuthSession]:
    if credentials is None:
        return None
    return await services.auth.get_session(credentials.credentials)


async def get_current_session(
    session: Optional[AuthSession] = Depends(get_current_session_optional),
) -> AuthSession:
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return session


async def get_current_profile(
    session: AuthSession = Depends(get_current_session),
    services: Services = Depends(get_services),
) -> Profile:
    return await services.access.resolve_profile(session)


async def get_reviewer(
    profile: Profile = Depends(get_current_profile),
    services: Services = Depends(get_services),
) -> Profile:
    return services.access.require_reviewer(profile)


async def get_admin(
    profile: Profile = Depends(get_current_profile),
    services: Services = Depends(get_services),
) -> Profile:
    return services.access.require_admin(profile)
