"""Fake Email Client — records messages instead of calling the provider.

Invariants:
    - sent holds one dict per send_email() call, in call order
    - fail_with, when set, is raised by every send_email() call
"""

from newsletter.core.subscriber_email import SubscriberEmail


class FakeEmailClient:

    def __init__(self):
        self.sent: list[dict] = []
        self.fail_with: Exception | None = None

    async def send_email(
        self,
        recipient: SubscriberEmail,
        subject: str,
        html_content: str,
        text_content: str,
    ) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append({
            "recipient": recipient.value,
            "subject": subject,
            "html": html_content,
            "text": text_content,
        })

    async def aclose(self) -> None:
        pass
