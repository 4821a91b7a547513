"""Outbound security notifications over SMTP."""

from __future__ import annotations

import smtplib
from datetime import datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from loguru import logger

from athletix.config.settings import settings
from athletix.core.errors import MailError

PASSWORD_CHANGED_SUBJECT = "Your Athletix password was changed"


def smtp_configured() -> bool:
    return bool(settings.smtp_host and settings.smtp_user and settings.smtp_password)


def build_password_changed_message(to_email: str, changed_at: datetime) -> MIMEMultipart:
    sender = settings.notify_email or settings.smtp_user
    msg = MIMEMultipart("alternative")
    msg["Subject"] = PASSWORD_CHANGED_SUBJECT
    msg["From"] = f'"Athletix Security" <{sender}>'
    msg["To"] = to_email

    text_body = f"""Hello,

Your Athletix account password was changed on {changed_at.strftime("%Y-%m-%d %H:%M:%S %Z").strip()}.

If you did not perform this action, please reset your password immediately or contact support.

- Athletix Security Team
"""
    msg.attach(MIMEText(text_body, "plain"))
    return msg


def send_password_changed_notification(to_email: str, changed_at: datetime) -> bool:
    """Tell the account owner their password changed.

    Returns:
        True if the mail was sent, False if SMTP is not configured

    Raises:
        MailError: If SMTP is configured but delivery fails
    """
    if not smtp_configured():
        logger.warning("[MAILER] SMTP not configured, skipping password change notification")
        return False

    msg = build_password_changed_message(to_email, changed_at)
    try:
        logger.info(f"[MAILER] Connecting to SMTP server {settings.smtp_host}:{settings.smtp_port}")
        with smtplib.SMTP(settings.smtp_host, settings.smtp_port) as server:
            server.starttls()
            server.login(settings.smtp_user, settings.smtp_password)
            server.send_message(msg)
    except smtplib.SMTPException as e:
        logger.error(f"[MAILER] SMTP error sending password change notification: {e}")
        raise MailError(str(e)) from e
    except OSError as e:
        logger.error(f"[MAILER] Could not reach SMTP server: {e}")
        raise MailError(str(e)) from e

    logger.info(f"[MAILER] Password change notification sent to {to_email}")
    return True
