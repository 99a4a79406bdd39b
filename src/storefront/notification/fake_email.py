"""Fake email adapter: records sent emails for testing."""

from uuid import uuid4

from protean.exceptions import SendError

from storefront.notification.email_port import EmailPort


class FakeEmailAdapter(EmailPort):
    """Email adapter that records messages in memory for test assertions."""

    def __init__(self):
        self.sent_emails: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "Email delivery failed"

    def configure(self, should_succeed: bool = True, failure_reason: str = "Email delivery failed"):
        """Configure the fake adapter behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def send(
        self,
        to: str,
        subject: str,
        body: str,
        html_body: str | None = None,
    ) -> dict:
        if not self.should_succeed:
            raise SendError(self.failure_reason)

        message_id = f"email-{uuid4().hex[:12]}"
        self.sent_emails.append(
            {
                "message_id": message_id,
                "to": to,
                "subject": subject,
                "body": body,
                "html_body": html_body,
            }
        )
        return {"message_id": message_id, "status": "sent"}

    def messages_to(self, address: str) -> list[dict]:
        """Recorded messages addressed to ``address``, oldest first."""
        return [message for message in self.sent_emails if message["to"] == address.lower()]
