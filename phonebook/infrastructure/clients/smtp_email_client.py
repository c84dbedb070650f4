from __future__ import annotations

import logging
import smtplib
import ssl
from dataclasses import dataclass
from email.message import EmailMessage

from phonebook.application.ports.email_sender_port import EmailSenderPort
from phonebook.domain.exceptions import EmailDeliveryError
from phonebook.shared.redaction import redact_email


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SmtpEmailClientSettings:
    host: str
    port: int
    user: str
    password: str
    use_tls: bool
    from_email: str
    timeout_seconds: float = 30.0

    def __post_init__(self):
        if self.host and not self.from_email:
            raise ValueError("EMAIL_FROM or SMTP_USER is required when SMTP_HOST is set.")


class SmtpEmailClient(EmailSenderPort):
    """SMTP mailer; with no host configured it only logs the send."""

    def __init__(self, settings: SmtpEmailClientSettings):
        self._settings = settings

    @property
    def is_configured(self) -> bool:
        return bool(self._settings.host)

    def _build_message(self, *, to_email: str, subject: str, text_body: str) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = self._settings.from_email
        msg["To"] = to_email
        msg.set_content(text_body)
        return msg

    def send(self, *, to_email: str, subject: str, text_body: str) -> None:
        if not self.is_configured:
            logger.info("smtp_email: dev_mode to=%s subject=%s", redact_email(to_email), subject)
            return

        msg = self._build_message(to_email=to_email, subject=subject, text_body=text_body)
        settings = self._settings
        context = ssl.create_default_context()
        try:
            if settings.use_tls:
                with smtplib.SMTP(settings.host, settings.port, timeout=settings.timeout_seconds) as server:
                    server.starttls(context=context)
                    if settings.user and settings.password:
                        server.login(settings.user, settings.password)
                    server.send_message(msg)
            else:
                with smtplib.SMTP_SSL(
                    settings.host,
                    settings.port,
                    context=context,
                    timeout=settings.timeout_seconds,
                ) as server:
                    if settings.user and settings.password:
                        server.login(settings.user, settings.password)
                    server.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error(
                "smtp_email: send_failed to=%s host=%s error=%s",
                redact_email(to_email),
                settings.host,
                exc.__class__.__name__,
            )
            raise EmailDeliveryError("Error sending email") from exc

        logger.info("smtp_email: sent to=%s subject=%s", redact_email(to_email), subject)
