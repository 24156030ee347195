"""
Authentication service.

Email/password sign-in issuing JWT access tokens, session lookup from a
token, sign-out, and session-change callbacks for components that need to
react when a principal signs in or out.
"""
import inspect
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, Optional, Union

from labhub.core.config import Settings
from labhub.core.exceptions import AuthenticationError
from labhub.core.security import create_access_token, decode_token, verify_password
from labhub.gateway.base import PersistenceGateway
from labhub.models.user import User

logger = logging.getLogger(__name__)

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"


@dataclass
class AuthSession:
    """An authenticated principal."""
    user_id: str
    email: str
    name: Optional[str]
    access_token: str
    token_id: str
    expires_at: datetime


SessionCallback = Callable[[str, Optional[AuthSession]], Union[None, Awaitable[None]]]


class AuthService:

    def __init__(self, gateway: PersistenceGateway, settings: Settings):
        self.gateway = gateway
        self.settings = settings
        self._revoked: set[str] = set()
        self._callbacks: list[SessionCallback] = []

    def on_session_change(self, callback: SessionCallback) -> Callable[[], None]:
        """Register ``callback(event, session)``. Returns an unsubscribe function."""
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    async def _notify(self, event: str, session: Optional[AuthSession]) -> None:
        for callback in list(self._callbacks):
            try:
                result = callback(event, session)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error(f"Session callback {getattr(callback, '__name__', callback)!r} failed on {event}: {e}")

    async def _find_user(self, email: str) -> Optional[User]:
        users = await self.gateway.select(User, filters={"email": email.lower()}, order_by=None, limit=1)
        return users[0] if users else None

    async def sign_in(self, email: str, password: str) -> AuthSession:
        user = await self._find_user(email)
        if user is None or not user.is_active or not verify_password(password, user.password_hash):
            logger.warning(f"Failed sign-in for {email}")
            raise AuthenticationError("Invalid email or password")

        token = create_access_token(
            subject=user.id,
            expires_delta=timedelta(minutes=self.settings.ACCESS_TOKEN_EXPIRE_MINUTES),
            secret_key=self.settings.SECRET_KEY,
            algorithm=self.settings.ALGORITHM,
        )
        payload = decode_token(token, self.settings.SECRET_KEY, self.settings.ALGORITHM)
        session = AuthSession(
            user_id=user.id,
            email=user.email,
            name=user.name,
            access_token=token,
            token_id=payload["jti"],
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
        logger.info(f"User {user.email} signed in")
        await self._notify(SIGNED_IN, session)
        return session

    async def get_session(self, token: str) -> Optional[AuthSession]:
        """Session for ``token``, or None if it is invalid, expired or revoked."""
        payload = decode_token(token, self.settings.SECRET_KEY, self.settings.ALGORITHM)
        if payload is None or payload.get("type") != "auth":
            return None
        token_id = payload.get("jti")
        if not token_id or token_id in self._revoked:
            return None

        user = await self.gateway.get(User, payload.get("sub"))
        if user is None or not user.is_active:
            return None
        return AuthSession(
            user_id=user.id,
            email=user.email,
            name=user.name,
            access_token=token,
            token_id=token_id,
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )

    async def sign_out(self, token: str) -> None:
        session = await self.get_session(token)
        if session is None:
            return
        self._revoked.add(session.token_id)
        logger.info(f"User {session.email} signed out")
        await self._notify(SIGNED_OUT, session)
