"""Notifier implementations for administrative e-mail.

Both classes satisfy the Notifier protocol through structural typing.
"""

import logging
import smtplib
from email.message import EmailMessage

from subscription_catalog.config import Settings, settings

logger = logging.getLogger(__name__)


class LoggingNotifier:
    """Development notifier that logs messages instead of sending them."""

    def __init__(self, from_email: str = "noreply@example.com") -> None:
        self.from_email = from_email

    def send(self, to: str, subject: str, body: str) -> None:
        logger.info(
            "Dev email dispatch to=%s subject=%r",
            to,
            subject,
            extra={"email_recipient": to, "email_subject": subject, "email_sender": self.from_email},
        )


class SmtpNotifier:
    """Plain-text e-mail over SMTP, with optional STARTTLS and login."""

    def __init__(
        self,
        *,
        from_email: str,
        host: str,
        port: int,
        username: str | None = None,
        password: str | None = None,
        use_tls: bool = True,
        timeout: float = 30,
    ) -> None:
        self.from_email = from_email
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    @classmethod
    def create(cls, config: Settings | None = None) -> "SmtpNotifier":
        """Factory method building an SMTP notifier from settings."""
        config = config or settings
        return cls(
            from_email=config.mail_from,
            host=config.smtp_host,
            port=config.smtp_port,
            username=config.smtp_username,
            password=config.smtp_password,
            use_tls=config.smtp_use_tls,
        )

    def _build_message(self, to: str, subject: str, body: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.from_email
        message["To"] = to
        message["Subject"] = subject
        message.set_content(body)
        return message

    def send(self, to: str, subject: str, body: str) -> None:
        message = self._build_message(to, subject, body)
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as client:
            if self.use_tls:
                client.starttls()
            if self.username and self.password:
                client.login(self.username, self.password)
            client.send_message(message)
        logger.info("Email sent successfully to: %s", to)


def create_notifier(config: Settings | None = None) -> LoggingNotifier | SmtpNotifier:
    """Pick the notifier named by EMAIL_PROVIDER."""
    config = config or settings
    if config.email_provider == "smtp":
        return SmtpNotifier.create(config)
    return LoggingNotifier(from_email=config.mail_from)
