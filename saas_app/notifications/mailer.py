"""
SaaS App: Transactional Email over SMTP

Sends multipart (text + html) messages from the support sender identity.
Port 465 uses implicit TLS, any other port upgrades with STARTTLS.
smtplib is blocking, so delivery runs in a worker thread.
"""

from __future__ import annotations

import asyncio
import re
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

import structlog

from saas_app.config import settings
from saas_app.notifications.errors import NotificationError

logger = structlog.get_logger(__name__)

_TAGS = re.compile(r"<[^>]+>")


def _plain_text(html_body: str) -> str:
    return _TAGS.sub("", html_body).strip()


class EmailSender:
    """SMTP email adapter. Disabled (send returns False) until SMTP is configured."""

    def __init__(
        self,
        host: str | None = None,
        port: int | None = None,
        user: str | None = None,
        password: str | None = None,
        from_address: str | None = None,
        from_name: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self.host = host if host is not None else settings.SMTP_HOST
        self.port = port or settings.SMTP_PORT
        self.user = user if user is not None else settings.SMTP_USER
        self.password = password if password is not None else settings.SMTP_PASSWORD
        self.from_address = from_address if from_address is not None else settings.EMAIL_SUPPORT_FROM_ADDRESS
        self.from_name = from_name if from_name is not None else settings.EMAIL_FROM_NAME
        self.timeout = timeout or settings.SMTP_TIMEOUT_SECONDS

    @property
    def enabled(self) -> bool:
        return bool(self.host and self.user and self.password and self.from_address)

    @property
    def sender(self) -> str:
        if self.from_name:
            return f"{self.from_name} <{self.from_address}>"
        return self.from_address

    def build_message(self, to: str, subject: str, body: str) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.sender
        msg["To"] = to
        msg.attach(MIMEText(_plain_text(body), "plain", "utf-8"))
        msg.attach(MIMEText(body, "html", "utf-8"))
        return msg

    def _deliver(self, to: str, msg: MIMEMultipart) -> None:
        if self.port == 465:
            context = ssl.create_default_context()
            with smtplib.SMTP_SSL(self.host, self.port, context=context, timeout=self.timeout) as server:
                server.login(self.user, self.password)
                server.sendmail(self.from_address, [to], msg.as_string())
        else:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                server.ehlo()
                server.starttls(context=ssl.create_default_context())
                server.login(self.user, self.password)
                server.sendmail(self.from_address, [to], msg.as_string())

    async def send(self, to: str, subject: str, body: str) -> bool:
        """
        Deliver one email.

        Returns False without sending when SMTP is not configured.

        Raises:
            NotificationError: the SMTP conversation failed.
        """
        if not self.enabled:
            logger.warning(
                "email_sender_disabled",
                reason="SMTP_HOST, SMTP_USER, SMTP_PASSWORD or EMAIL_SUPPORT_FROM_ADDRESS not set",
                source="smtp",
            )
            return False

        msg = self.build_message(to, subject, body)
        try:
            await asyncio.to_thread(self._deliver, to, msg)
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationError("smtp", f"delivery to {to} failed: {e}") from e

        logger.info("email_sent", subject=subject, source="smtp")
        return True
