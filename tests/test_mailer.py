"""Tests for the SMTP email adapter (saas_app/notifications/mailer.py)."""

from __future__ import annotations

import smtplib
from unittest.mock import MagicMock, patch

import pytest

from saas_app.notifications.errors import NotificationError
from saas_app.notifications.mailer import EmailSender


def _sender(port: int = 465) -> EmailSender:
    return EmailSender(
        host="smtp.example.com",
        port=port,
        user="mailer",
        password="secret",
        from_address="support@example.com",
        from_name="Kelly from saas-app.async-await.com",
    )


class TestEmailSenderConfig:
    def test_enabled_when_fully_configured(self) -> None:
        assert _sender().enabled is True

    def test_disabled_without_host(self) -> None:
        sender = EmailSender(host="", user="u", password="p", from_address="a@example.com")
        assert sender.enabled is False

    def test_sender_header_includes_name(self) -> None:
        assert _sender().sender == "Kelly from saas-app.async-await.com <support@example.com>"

    def test_build_message_headers_and_parts(self) -> None:
        msg = _sender().build_message("jane@example.com", "Welcome", "<p>Hello <b>Jane</b></p>")

        assert msg["To"] == "jane@example.com"
        assert msg["Subject"] == "Welcome"
        plain, html = msg.get_payload()
        assert plain.get_content_type() == "text/plain"
        assert plain.get_payload(decode=True).decode() == "Hello Jane"
        assert html.get_content_type() == "text/html"


@pytest.mark.asyncio
class TestSend:
    async def test_disabled_sender_returns_false(self) -> None:
        sender = EmailSender(host="", user="", password="", from_address="")
        with patch("saas_app.notifications.mailer.smtplib.SMTP_SSL") as smtp_ssl:
            result = await sender.send("jane@example.com", "Welcome", "<p>Hi</p>")

        assert result is False
        smtp_ssl.assert_not_called()

    async def test_port_465_uses_implicit_tls(self) -> None:
        with patch("saas_app.notifications.mailer.smtplib.SMTP_SSL") as smtp_ssl:
            result = await _sender(465).send("jane@example.com", "Welcome", "<p>Hi</p>")

        assert result is True
        server = smtp_ssl.return_value.__enter__.return_value
        server.login.assert_called_once_with("mailer", "secret")
        from_addr, to_addrs, _ = server.sendmail.call_args[0]
        assert from_addr == "support@example.com"
        assert to_addrs == ["jane@example.com"]

    async def test_other_port_uses_starttls(self) -> None:
        with patch("saas_app.notifications.mailer.smtplib.SMTP") as smtp:
            result = await _sender(587).send("jane@example.com", "Welcome", "<p>Hi</p>")

        assert result is True
        server = smtp.return_value.__enter__.return_value
        server.starttls.assert_called_once()
        server.sendmail.assert_called_once()

    async def test_smtp_failure_raises_notification_error(self) -> None:
        failing = MagicMock(side_effect=smtplib.SMTPAuthenticationError(535, b"bad credentials"))
        with patch("saas_app.notifications.mailer.smtplib.SMTP_SSL", failing):
            with pytest.raises(NotificationError) as exc_info:
                await _sender(465).send("jane@example.com", "Welcome", "<p>Hi</p>")

        assert exc_info.value.channel == "smtp"

    async def test_connection_refused_raises_notification_error(self) -> None:
        with patch("saas_app.notifications.mailer.smtplib.SMTP", MagicMock(side_effect=ConnectionRefusedError())):
            with pytest.raises(NotificationError):
                await _sender(587).send("jane@example.com", "Welcome", "<p>Hi</p>")
