"""Tests for the password change notification mail."""

import smtplib
from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from athletix.config.settings import settings
from athletix.core.errors import MailError
from athletix.core.mailer import build_password_changed_message, send_password_changed_notification

CHANGED_AT = datetime(2024, 3, 1, 8, 30, tzinfo=timezone.utc)


@pytest.fixture
def configured(monkeypatch):
    monkeypatch.setattr(settings, "smtp_host", "smtp.example.com")
    monkeypatch.setattr(settings, "smtp_port", 2525)
    monkeypatch.setattr(settings, "smtp_user", "mailer@example.com")
    monkeypatch.setattr(settings, "smtp_password", "secret")
    monkeypatch.setattr(settings, "notify_email", "")


def test_message_falls_back_to_smtp_user_as_sender(configured):
    msg = build_password_changed_message("juan@example.com", CHANGED_AT)

    assert msg["From"] == '"Athletix Security" <mailer@example.com>'
    assert msg["To"] == "juan@example.com"
    assert "2024-03-01 08:30:00 UTC" in msg.get_payload()[0].get_payload()


def test_not_configured_skips_sending(monkeypatch):
    monkeypatch.setattr(settings, "smtp_host", "")

    with patch("athletix.core.mailer.smtplib.SMTP") as smtp_cls:
        assert send_password_changed_notification("juan@example.com", CHANGED_AT) is False

    smtp_cls.assert_not_called()


def test_sends_over_starttls(configured):
    with patch("athletix.core.mailer.smtplib.SMTP") as smtp_cls:
        assert send_password_changed_notification("juan@example.com", CHANGED_AT) is True

    server = smtp_cls.return_value.__enter__.return_value
    smtp_cls.assert_called_once_with("smtp.example.com", 2525)
    server.starttls.assert_called_once()
    server.login.assert_called_once_with("mailer@example.com", "secret")
    server.send_message.assert_called_once()


def test_connection_failure_is_mail_error(configured):
    with patch("athletix.core.mailer.smtplib.SMTP", side_effect=ConnectionRefusedError("refused")):
        with pytest.raises(MailError, match="refused"):
            send_password_changed_notification("juan@example.com", CHANGED_AT)


def test_smtp_failure_is_mail_error(configured):
    with patch("athletix.core.mailer.smtplib.SMTP") as smtp_cls:
        smtp_cls.return_value.__enter__.return_value.login.side_effect = smtplib.SMTPAuthenticationError(535, b"bad")
        with pytest.raises(MailError):
            send_password_changed_notification("juan@example.com", CHANGED_AT)
