# lms/services/email_service.py
import logging
import smtplib
from email.message import EmailMessage
from typing import Protocol

from lms.core.config import settings
from lms.core.exceptions import EmailDeliveryFailed

logger = logging.getLogger(__name__)


class EmailSender(Protocol):
    def send(self, to_email: str, subject: str, body: str) -> None: ...


class SMTPEmailSender:
    """Plain-text mail over STARTTLS (gmail app password by default)."""

    def __init__(
        self,
        host: str,
        port: int,
        from_addr: str,
        password: str,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.from_addr = from_addr
        self.password = password
        self.timeout = timeout

    def send(self, to_email: str, subject: str, body: str) -> None:
        msg = EmailMessage()
        msg["From"] = self.from_addr
        msg["To"] = to_email
        msg["Subject"] = subject
        msg.set_content(body)

        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                smtp.starttls()
                smtp.login(self.from_addr, self.password)
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.warning("Email to %s failed: %s", to_email, e)
            raise EmailDeliveryFailed("failed to send email", details=str(e))

        logger.info("Email sent to %s", to_email)


_sender: EmailSender | None = None


def get_email_sender() -> EmailSender:
    global _sender
    if _sender is None:
        _sender = SMTPEmailSender(
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            from_addr=settings.EMAIL_FROM,
            password=settings.EMAIL_PASSWORD,
        )
    return _sender
