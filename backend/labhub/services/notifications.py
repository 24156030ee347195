"""
Email notification queue and delivery.

Queuing and delivery are separate steps:

- ``NotificationQueue.enqueue`` writes a pending row through the gateway and
  never raises. Business operations call it as a side effect.
- ``NotificationDispatcher`` drains pending rows through the configured
  backend, counting attempts on each row. A row that has used up its
  attempts ends in ``failed`` and is left alone from then on.
"""
import logging
import re
from html import unescape
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional

from labhub.core.exceptions import DeliveryError
from labhub.gateway.base import PersistenceGateway
from labhub.models.base import utcnow, as_utc
from labhub.models.email_queue import EmailQueueEntry, EmailStatus, DEFAULT_MAX_ATTEMPTS, TERMINAL_EMAIL_STATUSES
from labhub.services.email_backends import EmailBackend

logger = logging.getLogger(__name__)

_STYLE_RE = re.compile(r"<style[^>]*>.*?</style>", re.IGNORECASE | re.DOTALL)
_SCRIPT_RE = re.compile(r"<script[^>]*>.*?</script>", re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r"<[^>]+>")
_SPACE_RE = re.compile(r"\s+")


def html_to_text(html: str) -> str:
    """Plain-text rendering of an HTML body."""
    text = _STYLE_RE.sub("", html)
    text = _SCRIPT_RE.sub("", text)
    text = _TAG_RE.sub("", text)
    return unescape(_SPACE_RE.sub(" ", text).strip())


@dataclass
class OutboundEmail:
    """A rendered email ready to be queued."""
    to: str
    subject: str
    html: str
    to_name: Optional[str] = None
    text: Optional[str] = None
    template_name: Optional[str] = None
    template_data: Optional[dict] = None


@dataclass
class DeliveryReport:
    attempted: int = 0
    sent: int = 0
    retrying: int = 0
    failed: int = 0
    skipped: int = 0
    entry_ids: list[str] = field(default_factory=list)


class NotificationQueue:
    """Durable outbound email queue."""

    def __init__(self, gateway: PersistenceGateway, max_attempts: int = DEFAULT_MAX_ATTEMPTS):
        self.gateway = gateway
        self.max_attempts = max_attempts

    async def enqueue(self, email: OutboundEmail) -> Optional[EmailQueueEntry]:
        """Queue an email. Failures are logged, never raised."""
        try:
            entry = await self.gateway.queue_email(
                to_email=email.to,
                to_name=email.to_name,
                subject=email.subject,
                body_html=email.html,
                body_text=email.text or html_to_text(email.html),
                template_name=email.template_name,
                template_data=email.template_data,
                max_attempts=self.max_attempts,
            )
        except Exception as e:
            logger.error(f"Failed to queue email to {email.to} ({email.subject!r}): {e}")
            return None

        logger.info(f"Email queued: id={entry.id} to={email.to} subject={email.subject!r}")
        return entry

class NotificationDispatcher:
    """Delivers queued emails through one backend."""

    def __init__(
        self,
        gateway: PersistenceGateway,
        backend: EmailBackend,
        retry_delay: timedelta = timedelta(minutes=5),
        stale_after: timedelta = timedelta(minutes=15),
    ):
        self.gateway = gateway
        self.backend = backend
        self.retry_delay = retry_delay
        self.stale_after = stale_after

    def _is_stale(self, entry: EmailQueueEntry, now: datetime) -> bool:
        """A ``sending`` row untouched for ``stale_after`` lost its dispatcher."""
        return entry.status == EmailStatus.SENDING and as_utc(entry.updated) <= now - self.stale_after

    async def send(self, entry: EmailQueueEntry, now: Optional[datetime] = None) -> Optional[EmailStatus]:
        """
        Make one delivery attempt for ``entry``.

        The row is claimed first with a conditional update on its status and
        attempt count, so two dispatchers draining together never deliver the
        same row twice. Returns the status the row ends in, or None when the
        row was claimed elsewhere. Terminal rows are returned untouched.
        """
        if entry.status in TERMINAL_EMAIL_STATUSES:
            return entry.status
        now = now or utcnow()
        if entry.status == EmailStatus.SENDING and not self._is_stale(entry, now):
            return None

        snapshot = {"status": entry.status, "attempts": entry.attempts}
        if entry.attempts >= entry.max_attempts:
            failed = await self.gateway.claim(
                EmailQueueEntry,
                entry.id,
                snapshot,
                status=EmailStatus.FAILED,
                error_message=entry.error_message or "Delivery interrupted",
            )
            return EmailStatus.FAILED if failed is not None else None

        attempts = entry.attempts + 1
        claimed = await self.gateway.claim(
            EmailQueueEntry,
            entry.id,
            snapshot,
            status=EmailStatus.SENDING,
            attempts=attempts,
            updated=now,
        )
        if claimed is None:
            logger.info(f"Email {entry.id} already claimed by another dispatcher")
            return None

        try:
            await self.backend.send(claimed)
        except DeliveryError as e:
            return await self._record_failure(claimed, e.message, now)
        except Exception as e:
            logger.exception(f"Unexpected error delivering email {entry.id}")
            return await self._record_failure(claimed, f"{type(e).__name__}: {e}", now)

        await self.gateway.update(
            EmailQueueEntry,
            entry.id,
            status=EmailStatus.SENT,
            sent_at=now,
            error_message=None,
        )
        logger.info(f"Email {entry.id} sent to {entry.to_email}")
        return EmailStatus.SENT

    async def _record_failure(self, entry: EmailQueueEntry, error: str, now: datetime) -> EmailStatus:
        """Reschedule a failed attempt, or fail the row once attempts run out."""
        error_message = error[:500]
        if entry.attempts >= entry.max_attempts:
            logger.error(
                f"Email {entry.id} to {entry.to_email} failed permanently "
                f"after {entry.attempts} attempts: {error_message}"
            )
            await self.gateway.update(
                EmailQueueEntry,
                entry.id,
                status=EmailStatus.FAILED,
                error_message=error_message,
            )
            return EmailStatus.FAILED

        logger.warning(f"Email {entry.id} to {entry.to_email} failed (attempt {entry.attempts}/{entry.max_attempts}): {error_message}")
        await self.gateway.update(
            EmailQueueEntry,
            entry.id,
            status=EmailStatus.PENDING,
            error_message=error_message,
            scheduled_for=now + self.retry_delay,
        )
        return EmailStatus.PENDING

    async def due_entries(self, now: Optional[datetime] = None, limit: Optional[int] = None) -> list[EmailQueueEntry]:
        """Pending rows whose time has come, then ``sending`` rows gone stale."""
        now = now or utcnow()
        pending = await self.gateway.select(
            EmailQueueEntry,
            filters={"status": EmailStatus.PENDING},
            order_by="scheduled_for",
            descending=False,
        )
        stuck = await self.gateway.select(
            EmailQueueEntry,
            filters={"status": EmailStatus.SENDING},
            order_by="updated",
            descending=False,
        )
        due = [e for e in pending if as_utc(e.scheduled_for) <= now]
        due += [e for e in stuck if self._is_stale(e, now)]
        return due[:limit] if limit is not None else due

    async def drain(self, now: Optional[datetime] = None, limit: Optional[int] = None) -> DeliveryReport:
        """Attempt every email that is due."""
        now = now or utcnow()
        report = DeliveryReport()
        for entry in await self.due_entries(now, limit):
            status = await self.send(entry, now)
            if status is None:
                report.skipped += 1
                continue
            report.attempted += 1
            report.entry_ids.append(entry.id)
            if status == EmailStatus.SENT:
                report.sent += 1
            elif status == EmailStatus.PENDING:
                report.retrying += 1
            else:
                report.failed += 1
        if report.attempted or report.skipped:
            logger.info(
                f"Email queue drained: attempted={report.attempted} sent={report.sent} "
                f"retrying={report.retrying} failed={report.failed} skipped={report.skipped}"
            )
        return report
