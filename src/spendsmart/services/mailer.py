"""SMTP notification transport."""

from __future__ import annotations

import smtplib
import ssl
from dataclasses import dataclass, field
from email.message import EmailMessage
from email.utils import formataddr
from typing import Protocol

from ..config import BaseConfig
from ..errors import MailDeliveryError
from ..logging_config import get_logger

logger = get_logger("mailer")


class MailTransport(Protocol):
    def send(self, recipient: str, subject: str, text: str, html: str):
        ...  # pragma: no cover - interface


@dataclass(frozen=True, slots=True)
class MailContent:
    """A rendered message: subject plus plain text and HTML bodies."""

    subject: str
    text: str
    html: str


@dataclass(slots=True)
class DeliveryReport:
    accepted: list[str] = field(default_factory=list)
    rejected: list[str] = field(default_factory=list)


class SMTPMailer:
    """Sends multipart (plain text + HTML) messages through an SMTP relay."""

    def __init__(self, config: BaseConfig, *, timeout: float = 15.0) -> None:
        self.config = config
        self.timeout = timeout

    def _connect(self) -> smtplib.SMTP:
        cfg = self.config
        if cfg.MAIL_USE_SSL:
            return smtplib.SMTP_SSL(
                cfg.MAIL_HOST,
                cfg.MAIL_PORT,
                timeout=self.timeout,
                context=ssl.create_default_context(),
            )
        client = smtplib.SMTP(cfg.MAIL_HOST, cfg.MAIL_PORT, timeout=self.timeout)
        client.starttls(context=ssl.create_default_context())
        return client

    def build_message(self, recipient: str, subject: str, text: str, html: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = formataddr((self.config.APP_NAME, self.config.MAIL_SENDER or ""))
        message["To"] = recipient
        message["Subject"] = subject
        message.set_content(text)
        message.add_alternative(html, subtype="html")
        return message

    def send(self, recipient: str, subject: str, text: str, html: str) -> DeliveryReport:
        """Deliver one message; raises ``MailDeliveryError`` on any transport failure."""

        if not self.config.mail_configured:
            raise MailDeliveryError("Mail transport is not configured (missing credentials).")

        message = self.build_message(recipient, subject, text, html)
        try:
            with self._connect() as client:
                client.login(self.config.MAIL_USERNAME, self.config.MAIL_PASSWORD)
                refused = client.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            raise MailDeliveryError(f"SMTP delivery failed: {exc}") from exc

        report = DeliveryReport(
            accepted=[recipient] if recipient not in refused else [],
            rejected=sorted(refused),
        )
        logger.info(
            "Mail sent",
            extra={"accepted": report.accepted, "rejected": report.rejected},
        )
        return report
