"""Outbound HTML email: SMTP transport, or a console transport that only logs."""

from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage
from typing import TYPE_CHECKING, Protocol

from app.services.errors import MailDispatchError

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)


class Mailer(Protocol):
    def send(self, to: str, subject: str, html_body: str) -> None: ...


def _build_message(sender: str, to: str, subject: str, html_body: str) -> EmailMessage:
    msg = EmailMessage()
    msg["From"] = sender
    msg["To"] = to
    msg["Reply-To"] = sender
    msg["Subject"] = subject
    msg.set_content("This message requires an HTML-capable email client.")
    msg.add_alternative(html_body, subtype="html")
    return msg


class SmtpMailer:
    """Send through the configured SMTP relay. Raises MailDispatchError on any transport failure."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def send(self, to: str, subject: str, html_body: str) -> None:
        s = self.settings
        msg = _build_message(s.MAIL_FROM, to, subject, html_body)
        try:
            with smtplib.SMTP(s.SMTP_HOST, s.SMTP_PORT, timeout=s.SMTP_TIMEOUT_SEC) as smtp:
                if s.SMTP_USE_TLS:
                    smtp.starttls()
                if s.SMTP_USER:
                    password = s.SMTP_PASSWORD.get_secret_value() if s.SMTP_PASSWORD else ""
                    smtp.login(s.SMTP_USER, password)
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(
                "Mail dispatch failed",
                extra={"smtp_host": s.SMTP_HOST, "subject": subject, "reason": str(e)[:400]},
            )
            raise MailDispatchError(cause=e) from e
        logger.info("Mail sent", extra={"subject": subject})


class ConsoleMailer:
    """Dev transport: log the message instead of sending it."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def send(self, to: str, subject: str, html_body: str) -> None:
        logger.info("Mail (console) to=%s subject=%s\n%s", to, subject, html_body)


def get_mailer(settings: Settings) -> Mailer:
    if settings.MAIL_BACKEND == "smtp":
        return SmtpMailer(settings)
    return ConsoleMailer(settings)
