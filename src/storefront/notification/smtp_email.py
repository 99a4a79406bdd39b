"""SMTP email adapter."""

import smtplib
from email.message import EmailMessage
from uuid import uuid4

import structlog
from protean.exceptions import SendError

from storefront.notification.email_port import EmailPort

logger = structlog.get_logger(__name__)


class SmtpEmailAdapter(EmailPort):
    """Delivers mail through an SMTP relay using STARTTLS when credentials are set."""

    def __init__(self, host: str, port: int, username: str, password: str, sender: str, timeout: float = 10.0):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender
        self.timeout = timeout

    def _build_message(self, to: str, subject: str, body: str, html_body: str | None) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = subject
        message["Message-ID"] = f"<{uuid4().hex}@{self.host}>"
        message.set_content(body)
        if html_body:
            message.add_alternative(html_body, subtype="html")
        return message

    def send(
        self,
        to: str,
        subject: str,
        body: str,
        html_body: str | None = None,
    ) -> dict:
        message = self._build_message(to, subject, body, html_body)
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as client:
                if self.username:
                    client.starttls()
                    client.login(self.username, self.password)
                client.send_message(message)
        except (OSError, smtplib.SMTPException) as exc:
            logger.warning("smtp_send_failed", to=to, subject=subject, error=str(exc))
            raise SendError(f"Could not deliver email to {to}: {exc}") from exc

        return {"message_id": message["Message-ID"], "status": "sent"}
