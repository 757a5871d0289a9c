"""Email Client — wraps httpx.AsyncClient with timeout and error mapping for the email provider.

Invariants:
    - Sender is a validated SubscriberEmail, fixed at construction
    - The authorization token is unwrapped only to build the request header
    - Timeouts, transport errors and non-2xx responses raise EmailDeliveryError
    - No retries: the caller decides whether a failed delivery is retried

Design Decisions:
    - Wrapper over raw client: routes depend on send_email(), not on the provider's API
    - http_client injectable: tests pass an httpx.MockTransport-backed client
"""

import logging
from datetime import timedelta

import httpx
from pydantic import SecretStr

from newsletter.config import EmailClientSettings
from newsletter.core.errors import EmailDeliveryError, ErrorContext
from newsletter.core.subscriber_email import SubscriberEmail

logger = logging.getLogger(__name__)

AUTHORIZATION_HEADER = "X-Postmark-Server-Token"


class EmailClient:
    """Sends transactional email through an HTTP email provider."""

    def __init__(
        self,
        base_url: str,
        sender: SubscriberEmail,
        authorization_token: SecretStr,
        timeout: timedelta,
        http_client: httpx.AsyncClient | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.sender = sender
        self.authorization_token = authorization_token
        self.http_client = http_client or httpx.AsyncClient(
            timeout=timeout.total_seconds(),
        )

    @classmethod
    def from_settings(
        cls,
        settings: EmailClientSettings,
        http_client: httpx.AsyncClient | None = None,
    ) -> "EmailClient":
        return cls(
            settings.base_url,
            settings.sender(),
            settings.authorization_token,
            settings.timeout,
            http_client=http_client,
        )

    async def send_email(
        self,
        recipient: SubscriberEmail,
        subject: str,
        html_content: str,
        text_content: str,
    ) -> None:
        """POST one message to the provider. Raises EmailDeliveryError on failure."""
        body = {
            "From": self.sender.value,
            "To": recipient.value,
            "Subject": subject,
            "HtmlBody": html_content,
            "TextBody": text_content,
        }
        headers = {
            AUTHORIZATION_HEADER: self.authorization_token.get_secret_value(),
        }
        context = ErrorContext(operation="send_email")
        try:
            response = await self.http_client.post(
                f"{self.base_url}/email", json=body, headers=headers,
            )
            response.raise_for_status()
        except httpx.TimeoutException as e:
            logger.error("Email provider timed out", extra={"operation": "send_email"})
            raise EmailDeliveryError("request timed out", "timeout", context) from e
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Email provider returned {e.response.status_code}",
                extra={"operation": "send_email"},
            )
            raise EmailDeliveryError(
                f"status {e.response.status_code}", "status", context,
            ) from e
        except httpx.HTTPError as e:
            logger.error(
                f"Email provider transport error: {e}",
                extra={"operation": "send_email"},
            )
            raise EmailDeliveryError(str(e), "transport", context) from e

    async def aclose(self) -> None:
        await self.http_client.aclose()
