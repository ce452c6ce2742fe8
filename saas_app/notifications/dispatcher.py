"""
SaaS App: Best-Effort Notification Dispatcher

Both signup side effects go through here: the welcome email and the
mailing-list registration. Every failure is caught, logged, and turned into a
False return. Callers may ignore the result; nothing here ever raises into the
signup workflow.
"""

from __future__ import annotations

from typing import Callable

import structlog

from saas_app.config import settings
from saas_app.notifications.mailchimp import MailchimpClient
from saas_app.notifications.mailer import EmailSender

logger = structlog.get_logger(__name__)


class NotificationDispatcher:
    """
    Fire-and-forget notification capability.

    Usage:
        dispatcher = NotificationDispatcher()
        await dispatcher.send_welcome_email(to, subject, body)
        await dispatcher.register_signup(email)
    """

    def __init__(
        self,
        email_sender: EmailSender | None = None,
        mailchimp_factory: Callable[[], MailchimpClient] = MailchimpClient,
    ) -> None:
        self.email_sender = email_sender or EmailSender()
        self.mailchimp_factory = mailchimp_factory

    async def send_welcome_email(self, to: str, subject: str, body: str) -> bool:
        """Send a transactional email. Returns True only on confirmed delivery."""
        try:
            return await self.email_sender.send(to, subject, body)
        except Exception as exc:
            logger.error(
                "welcome_email_failed",
                subject=subject,
                error=str(exc),
                error_type=type(exc).__name__,
                source="dispatcher",
            )
            return False

    async def register_signup(self, email: str, list_name: str | None = None) -> bool:
        """Add `email` to a mailing list ("signups" by default)."""
        list_name = list_name or settings.SIGNUP_LIST_NAME
        try:
            async with self.mailchimp_factory() as client:
                return await client.add_to_list(email, list_name)
        except Exception as exc:
            logger.error(
                "mailing_list_registration_failed",
                list_name=list_name,
                error=str(exc),
                error_type=type(exc).__name__,
                source="dispatcher",
            )
            return False
