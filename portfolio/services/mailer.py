"""Outbound email over SMTP (password reset links, replies to contact messages)."""

import logging
import smtplib
import ssl
from email.message import EmailMessage
from typing import Protocol

from portfolio.core.config import Settings, get_settings

logger = logging.getLogger(__name__)


class MailDeliveryError(Exception):
    """Raised when the mail transport refuses or fails to deliver a message."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class Mailer(Protocol):
    def send(self, to: str, subject: str, html: str) -> None: ...


class SmtpMailer:
    """Send HTML email through the SMTP server configured in settings."""

    def __init__(self, settings: Settings) -> None:
        self.host = settings.SMTP_HOST
        self.port = settings.SMTP_PORT
        self.username = settings.SMTP_USERNAME
        self.password = (
            settings.SMTP_PASSWORD.get_secret_value() if settings.SMTP_PASSWORD else None
        )
        self.use_tls = settings.SMTP_USE_TLS
        self.timeout = settings.SMTP_TIMEOUT_SEC
        self.sender = settings.EMAIL_FROM

    def _build(self, to: str, subject: str, html: str) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self.sender
        msg["To"] = to
        msg["Subject"] = subject
        msg.set_content("This message requires an HTML capable mail client.")
        msg.add_alternative(html, subtype="html")
        return msg

    def send(self, to: str, subject: str, html: str) -> None:
        """
        Deliver one message. Blocks until the server accepts it.

        Raises MailDeliveryError on connection, TLS, authentication or
        recipient errors.
        """
        msg = self._build(to, subject, html)
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                if self.use_tls:
                    smtp.starttls(context=ssl.create_default_context())
                if self.username and self.password:
                    smtp.login(self.username, self.password)
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.warning("Mail delivery failed: to=%s subject=%r error=%s", to, subject, e)
            raise MailDeliveryError("Error sending email.", cause=e) from e
        logger.info("Mail sent: to=%s subject=%r", to, subject)


def get_mailer() -> Mailer:
    """Dependency returning the configured mail transport."""
    return SmtpMailer(get_settings())
