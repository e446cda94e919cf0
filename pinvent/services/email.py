"""
Email delivery over SMTP.

Uses the SMTP settings from pinvent.core.config.settings. Unlike a
best-effort notifier, every failure (missing configuration included) raises
EmailDeliveryError so the calling operation can report it.
"""

import html
import logging
import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import Optional

from pinvent.core.config import settings

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    pass


def default_sender() -> str:
    return settings.EMAIL_FROM or settings.SMTP_USERNAME


def send_email(
    subject: str,
    html_body: str,
    send_to: str,
    sent_from: str,
    reply_to: Optional[str] = None,
) -> None:
    """Send one HTML email. Raises EmailDeliveryError on any failure."""
    if not settings.SMTP_SERVER or not settings.SMTP_USERNAME:
        logger.warning("SMTP not configured, cannot send email to %s", send_to)
        raise EmailDeliveryError("SMTP is not configured")

    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = sent_from
    msg["To"] = send_to
    if reply_to:
        msg["Reply-To"] = reply_to
    msg.attach(MIMEText(html_body, "html"))

    try:
        with smtplib.SMTP(settings.SMTP_SERVER, settings.SMTP_PORT, timeout=settings.SMTP_TIMEOUT_SECONDS) as server:
            server.ehlo()
            server.starttls()
            server.ehlo()
            server.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)
            server.sendmail(sent_from, send_to, msg.as_string())
    except (smtplib.SMTPException, OSError) as e:
        logger.error("Failed to send email to %s: %s", send_to, e)
        raise EmailDeliveryError(str(e)) from e

    logger.info("Email '%s' sent to %s", subject, send_to)


def password_reset_body(name: str, reset_link: str) -> str:
    return f"""
    <h2>Hello {html.escape(name)}</h2>
    <p>Please use the url below to reset your password</p>
    <p>Reset link is valid for {settings.RESET_TOKEN_EXPIRE_MINUTES} minutes</p>
    <a href="{reset_link}" clicktracking=off>{reset_link}</a>
    <p>Best regards,</p>
    <p>Your {settings.APP_NAME}</p>
    """


def get_notifier():
    """FastAPI dependency; tests override it with a recording fake."""
    return send_email
