"""
Email delivery backends.

Each backend delivers one queued email or raises ``DeliveryError``. The
backend is picked once from ``EMAIL_PROVIDER``:

- ``console``: log the email (development/testing)
- ``resend``: Resend HTTPS API
- ``sendgrid``: SendGrid v3 HTTPS API
- ``smtp``: plain SMTP through smtplib
"""
import asyncio
import logging
import smtplib
from abc import ABC, abstractmethod
from email.message import EmailMessage
from typing import Optional

import httpx

from labhub.core.config import Settings
from labhub.core.exceptions import DeliveryError
from labhub.models.email_queue import EmailQueueEntry

logger = logging.getLogger(__name__)


class EmailBackend(ABC):
    """Delivers a single email."""

    def __init__(self, from_email: str, from_name: str):
        self.from_email = from_email
        self.from_name = from_name

    @property
    def sender(self) -> str:
        return f"{self.from_name} <{self.from_email}>"

    @abstractmethod
    async def send(self, entry: EmailQueueEntry) -> None:
        """Deliver ``entry`` or raise DeliveryError."""


class ConsoleBackend(EmailBackend):
    """Logs emails instead of sending them."""

    def __init__(self, from_email: str, from_name: str):
        super().__init__(from_email, from_name)
        self.sent: list[EmailQueueEntry] = []

    async def send(self, entry: EmailQueueEntry) -> None:
        self.sent.append(entry)
        logger.info(
            f"\n{'=' * 80}\nEMAIL TO: {entry.to_email}\nFROM: {self.sender}\n"
            f"SUBJECT: {entry.subject}\n{'-' * 80}\n{entry.body_text or entry.body_html}\n{'=' * 80}"
        )


class HttpApiBackend(EmailBackend):
    """Base for JSON-over-HTTPS providers."""
    url: str = ""
    provider: str = ""

    def __init__(
        self,
        from_email: str,
        from_name: str,
        api_key: Optional[str],
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(from_email, from_name)
        if not api_key:
            raise ValueError(f"EMAIL_API_KEY is required for the {self.provider} provider")
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport

    @abstractmethod
    def payload(self, entry: EmailQueueEntry) -> dict:
        """Provider request body for ``entry``."""

    async def send(self, entry: EmailQueueEntry) -> None:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.url, headers=headers, json=self.payload(entry))
        except httpx.HTTPError as e:
            raise DeliveryError(f"{self.provider} request failed: {type(e).__name__}: {e}") from e

        if response.is_error:
            raise DeliveryError(f"{self.provider} API error {response.status_code}: {response.text[:300]}")


class ResendBackend(HttpApiBackend):
    url = "https://api.resend.com/emails"
    provider = "resend"

    def payload(self, entry: EmailQueueEntry) -> dict:
        return {
            "from": self.sender,
            "to": [entry.to_email],
            "subject": entry.subject,
            "html": entry.body_html,
            "text": entry.body_text,
        }


class SendGridBackend(HttpApiBackend):
    url = "https://api.sendgrid.com/v3/mail/send"
    provider = "sendgrid"

    def payload(self, entry: EmailQueueEntry) -> dict:
        recipient = {"email": entry.to_email}
        if entry.to_name:
            recipient["name"] = entry.to_name
        content = []
        if entry.body_text:
            content.append({"type": "text/plain", "value": entry.body_text})
        content.append({"type": "text/html", "value": entry.body_html})
        return {
            "personalizations": [{"to": [recipient]}],
            "from": {"email": self.from_email, "name": self.from_name},
            "subject": entry.subject,
            "content": content,
        }


class SmtpBackend(EmailBackend):
    """SMTP delivery; the blocking client runs in a worker thread."""

    def __init__(
        self,
        from_email: str,
        from_name: str,
        host: Optional[str],
        port: int = 465,
        use_tls: bool = True,
        username: Optional[str] = None,
        password: Optional[str] = None,
        timeout: float = 10.0,
    ):
        super().__init__(from_email, from_name)
        if not host:
            raise ValueError("SMTP_HOST is required for the smtp provider")
        self.host = host
        self.port = port
        self.use_tls = use_tls
        self.username = username
        self.password = password
        self.timeout = timeout

    def build_message(self, entry: EmailQueueEntry) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = f"{entry.to_name} <{entry.to_email}>" if entry.to_name else entry.to_email
        message["Subject"] = entry.subject
        message.set_content(entry.body_text or "")
        message.add_alternative(entry.body_html, subtype="html")
        return message

    def _deliver(self, message: EmailMessage) -> None:
        client_cls = smtplib.SMTP_SSL if self.use_tls else smtplib.SMTP
        with client_cls(self.host, self.port, timeout=self.timeout) as client:
            if self.username and self.password:
                client.login(self.username, self.password)
            client.send_message(message)

    async def send(self, entry: EmailQueueEntry) -> None:
        message = self.build_message(entry)
        try:
            await asyncio.to_thread(self._deliver, message)
        except (smtplib.SMTPException, OSError) as e:
            raise DeliveryError(f"smtp delivery failed: {type(e).__name__}: {e}") from e


def build_email_backend(settings: Settings) -> EmailBackend:
    """Backend for the configured EMAIL_PROVIDER."""
    provider = settings.EMAIL_PROVIDER
    if provider == "resend":
        return ResendBackend(
            settings.EMAIL_FROM,
            settings.EMAIL_FROM_NAME,
            settings.EMAIL_API_KEY,
            timeout=settings.EMAIL_HTTP_TIMEOUT_SECONDS,
        )
    if provider == "sendgrid":
        return SendGridBackend(
            settings.EMAIL_FROM,
            settings.EMAIL_FROM_NAME,
            settings.EMAIL_API_KEY,
            timeout=settings.EMAIL_HTTP_TIMEOUT_SECONDS,
        )
    if provider == "smtp":
        return SmtpBackend(
            settings.EMAIL_FROM,
            settings.EMAIL_FROM_NAME,
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            use_tls=settings.SMTP_TLS,
            username=settings.SMTP_USERNAME,
            password=settings.SMTP_PASSWORD,
            timeout=settings.EMAIL_HTTP_TIMEOUT_SECONDS,
        )
    return ConsoleBackend(settings.EMAIL_FROM, settings.EMAIL_FROM_NAME)
