"""
Authentication endpoints.

Endpoints:
- POST /api/v1/auth/sign-in - Email/password sign-in
- POST /api/v1/auth/sign-out - Revoke the current token
- GET /api/v1/auth/session - Current session
- GET /api/v1/auth/me - Current profile
"""
from fastapi import APIRouter, Depends, status

from labhub.core.container import Services
from labhub.core.deps import get_current_profile, get_current_session, get_services
from labhub.models.profile import Profile
from labhub.schemas.auth import ProfileResponse, SessionResponse, SignInRequest, SignInResponse
from labhub.services.auth import AuthSession

router = APIRouter()


def profile_to_response(profile: Profile, services: Services) -> ProfileResponse:
    """Convert Profile model to ProfileResponse schema."""
    return ProfileResponse(
        id=profile.id,
        email=profile.email,
        full_name=profile.full_name,
        role=profile.role.value,
        is_admin=services.access.is_admin(profile),
        can_review=services.access.can_review(profile),
        notification_preferences=profile.notification_preferences,
        created=profile.created,
        updated=profile.updated,
    )


def session_to_response(session: AuthSession) -> SessionResponse:
    return SessionResponse(
        access_token=session.access_token,
        user_id=session.user_id,
        email=session.email,
        expires_at=session.expires_at,
    )


@router.post("/sign-in", response_model=SignInResponse)
async def sign_in(
    credentials: SignInRequest,
    services: Services = Depends(get_services),
):
    """Authenticate with email/password."""
    session = await services.auth.sign_in(credentials.email, credentials.password)
    profile = await services.access.resolve_profile(session)
    return SignInResponse(
        session=session_to_response(session),
        profile=profile_to_response(profile, services),
    )


@router.post("/sign-out", status_code=status.HTTP_204_NO_CONTENT)
async def sign_out(
    session: AuthSession = Depends(get_current_session),
    services: Services = Depends(get_services),
):
    """Revoke the bearer token."""
    await services.auth.sign_out(session.access_token)
    return None


@router.get("/session", response_model=SessionResponse)
async def get_session(session: AuthSession = Depends(get_current_session)):
    return session_to_response(session)


@router.get("/me", response_model=ProfileResponse)
async def get_me(
    profile: Profile = Depends(get_current_profile),
    services: Services = Depends(get_services),
):
    return profile_to_response(profile, services)
