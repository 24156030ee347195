"""
Error taxonomy for the back-office services.

Services raise these; the API layer turns them into HTTP responses.
"""
from typing import Optional


class LabHubError(Exception):
    """Base class for all service errors."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(LabHubError):
    """Bad or missing input. Raised before any write."""
    status_code = 400

    def __init__(self, message: str, errors: Optional[dict[str, str]] = None):
        super().__init__(message)
        self.errors = errors or {}


class AuthenticationError(LabHubError):
    """Missing, invalid or revoked credentials."""
    status_code = 401


class AuthorizationError(LabHubError):
    """Authenticated, but the role is insufficient."""
    status_code = 403


class NotFoundError(LabHubError):
    status_code = 404


class ConflictError(LabHubError):
    """Disallowed status transition or stale version."""
    status_code = 409


class TransientStoreError(LabHubError):
    """The persistence gateway failed; the operation may be retried."""
    status_code = 503


class DeliveryError(LabHubError):
    """An email backend failed to deliver a message."""
    status_code = 502
