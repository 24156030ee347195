"""
Persistence gateway contract.

Every service talks to the record store through this interface. Records are
the ORM model instances from ``labhub.models``; each call is its own unit of
work, so a write is committed (or has failed) when the call returns.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Optional, TypeVar

from labhub.db.base import Base
from labhub.models.email_queue import EmailQueueEntry

ModelT = TypeVar("ModelT", bound=Base)


class PersistenceGateway(ABC):
    """Abstract record store."""

    @abstractmethod
    async def create(self, model: type[ModelT], **values: Any) -> ModelT:
        """Insert a new row and return it with defaults applied."""

    @abstractmethod
    async def get(self, model: type[ModelT], record_id: str) -> Optional[ModelT]:
        """Single-row lookup by primary key."""

    @abstractmethod
    async def select(
        self,
        model: type[ModelT],
        filters: Optional[dict[str, Any]] = None,
        order_by: Optional[str] = "created",
        descending: bool = True,
        limit: Optional[int] = None,
    ) -> list[ModelT]:
        """Rows matching every ``column == value`` pair in ``filters``."""

    @abstractmethod
    async def update(self, model: type[ModelT], record_id: str, **values: Any) -> Optional[ModelT]:
        """Update columns on one row. Returns None when the row does not exist."""

    @abstractmethod
    async def claim(
        self,
        model: type[ModelT],
        record_id: str,
        expected: dict[str, Any],
        **values: Any,
    ) -> Optional[ModelT]:
        """
        Conditional update: write ``values`` only while every column in
        ``expected`` still holds the given value.

        Returns the updated row, or None when the row is gone or another
        writer changed it first.
        """

    async def queue_email(
        self,
        to_email: str,
        subject: str,
        body_html: str,
        body_text: Optional[str] = None,
        to_name: Optional[str] = None,
        template_name: Optional[str] = None,
        template_data: Optional[dict] = None,
        max_attempts: Optional[int] = None,
        scheduled_for: Optional[datetime] = None,
    ) -> EmailQueueEntry:
        """Hand an outbound email to storage as a pending queue row."""
        values: dict[str, Any] = {
            "to_email": to_email,
            "to_name": to_name or None,
            "subject": subject,
            "body_html": body_html,
            "body_text": body_text,
            "template_name": template_name,
            "template_data": template_data,
        }
        if max_attempts is not None:
            values["max_attempts"] = max_attempts
        if scheduled_for is not None:
            values["scheduled_for"] = scheduled_for
        return await self.create(EmailQueueEntry, **values)

    async def close(self) -> None:
        """Release connections. Called once at shutdown."""
