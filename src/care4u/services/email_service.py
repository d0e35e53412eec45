"""Email service — delivers one-time codes via async SMTP."""

from __future__ import annotations

import logging
from email.message import EmailMessage
from typing import Protocol

import aiosmtplib

from care4u.config import Settings, settings

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    """Anything that can deliver a one-time code to an email address."""

    async def send_otp(self, to_email: str, code: str) -> bool: ...


class EmailService:
    """Sends verification-code emails using the configured SMTP server."""

    def __init__(self, config: Settings | None = None) -> None:
        self._config = config or settings

    async def send_otp(self, to_email: str, code: str) -> bool:
        """Email *code* to *to_email*.

        Returns ``True`` once the SMTP server accepted the message and
        ``False`` on any transport error (which is logged, not raised).
        """
        app_name = self._config.app_name
        msg = EmailMessage()
        msg["Subject"] = f"Your {app_name} App Verification Code"
        msg["From"] = self._config.email_from
        msg["To"] = to_email
        msg.set_content(
            f"Your {app_name} verification code is {code}.\n\n"
            f"Enter it in the {app_name} mobile app to complete your sign-in.\n"
            "If you did not try to log in, you can safely ignore this email.\n"
        )
        msg.add_alternative(_render_html(app_name, code), subtype="html")

        logger.info("Sending verification code email to %s", to_email)
        try:
            await aiosmtplib.send(
                msg,
                hostname=self._config.smtp_host,
                port=self._config.smtp_port,
                username=self._config.smtp_username or None,
                password=self._config.smtp_password or None,
                start_tls=True,
            )
        except (aiosmtplib.SMTPException, OSError) as exc:
            logger.error("Failed to send verification email to %s: %s", to_email, exc)
            return False

        logger.info("Verification email sent to %s", to_email)
        return True


class LoggingNotifier:
    """Development notifier: logs the code instead of emailing it."""

    async def send_otp(self, to_email: str, code: str) -> bool:
        logger.info("📧 Verification code for %s: %s", to_email, code)
        return True


def build_notifier(config: Settings | None = None) -> Notifier:
    """Return an SMTP notifier, or a logging one when no host is set."""
    config = config or settings
    if not config.smtp_host:
        logger.warning("SMTP_HOST not set — verification codes will only be logged")
        return LoggingNotifier()
    return EmailService(config)


def _render_html(app_name: str, code: str) -> str:
    return f"""\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 30px;">
  <h1 style="color: #1875C3; text-align: center; font-size: 24px;">{app_name}</h1>
  <p style="color: #333; font-size: 16px;">
    Your verification code is shown below. Please enter it in the {app_name}
    mobile app to complete your sign-in.
  </p>
  <div style="background-color: #f5f5f5; padding: 20px; text-align: center; border-radius: 8px;">
    <h1 style="color: #1875C3; font-size: 32px; margin: 0; letter-spacing: 5px;">{code}</h1>
  </div>
  <p style="color: #333; font-size: 14px;">
    If you did not try to log in, you can safely ignore this email.
  </p>
</div>
"""
