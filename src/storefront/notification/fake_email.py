"""In-memory mailbox used by tests and local runs."""

from uuid import uuid4

from storefront.notification.email_port import EmailPort, EmailReceipt

_DEFAULT_FAILURE = "SMTP unavailable"


class FakeEmailAdapter(EmailPort):
    name = "fake-email"

    def __init__(self):
        self.sent_emails: list[dict] = []
        self.refuse_with: str | None = None

    def configure(self, should_succeed: bool = True, failure_reason: str = _DEFAULT_FAILURE):
        """Make subsequent sends succeed, or be refused with ``failure_reason``."""
        self.refuse_with = None if should_succeed else failure_reason

    def send(self, to: str, subject: str, body: str) -> EmailReceipt:
        if self.refuse_with:
            return EmailReceipt(delivered=False, error=self.refuse_with)

        receipt = EmailReceipt(delivered=True, message_id=f"mail-{uuid4().hex[:10]}")
        self.sent_emails.append({"message_id": receipt.message_id, "to": to, "subject": subject, "body": body})
        return receipt

    def inbox(self, address: str) -> list[dict]:
        """Messages delivered to ``address``, oldest first."""
        return [mail for mail in self.sent_emails if mail["to"] == address]

    def reset(self):
        self.sent_emails.clear()
        self.refuse_with = None
