"""
Email adapter for the MamaCare backend.

The default implementation uses SMTP with the credentials from Settings.
Any delivery failure is logged and reported as a False outcome, never raised.
"""

from __future__ import annotations

from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
import logging
import smtplib
import ssl
from typing import Optional, Protocol

from .config import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmailMessage:
    to: str
    subject: str
    html_body: str
    text_body: Optional[str] = None
    reply_to: Optional[str] = None


class Mailer(Protocol):
    def send(self, message: EmailMessage) -> bool: ...


class SMTPMailer:
    """Sends transactional email through an SMTP relay."""

    def __init__(self, settings: Settings, timeout: float = 10.0) -> None:
        self._host = settings.smtp_host
        self._port = settings.smtp_port or 465
        self._user = settings.smtp_user
        self._password = settings.smtp_password
        self._sender = settings.smtp_from or settings.smtp_user
        self._timeout = timeout

    def _build(self, message: EmailMessage) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = message.subject
        msg["From"] = self._sender
        msg["To"] = message.to
        if message.reply_to:
            msg["Reply-To"] = message.reply_to
        msg.attach(MIMEText(message.text_body or message.html_body, "plain", "utf-8"))
        msg.attach(MIMEText(message.html_body, "html", "utf-8"))
        return msg

    def send(self, message: EmailMessage) -> bool:
        try:
            msg = self._build(message)
            if self._port == 465:
                context = ssl.create_default_context()
                with smtplib.SMTP_SSL(self._host, self._port, context=context, timeout=self._timeout) as server:
                    server.login(self._user, self._password)
                    server.sendmail(self._user, [message.to], msg.as_string())
            else:
                with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as server:
                    server.ehlo()
                    server.starttls(context=ssl.create_default_context())
                    server.login(self._user, self._password)
                    server.sendmail(self._user, [message.to], msg.as_string())
        except Exception:
            logger.exception("Email delivery to %s failed", message.to)
            return False
        logger.info("Email '%s' sent to %s", message.subject, message.to)
        return True
