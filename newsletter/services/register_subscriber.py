"""Registration Workflow — stores a pending subscriber and emails the confirmation link.

Invariants:
    - Subscriber row and token row are committed together or not at all
    - The email is sent only after the commit succeeds
    - A known email address is rejected with DuplicateSubscriberError
      (checked up front, and again by the unique constraint when two requests race)

Design Decisions:
    - Confirmation email bodies are plain f-strings; no template engine
"""

import logging
from urllib.parse import urlencode

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from newsletter.core.domain_types import SubscriptionToken
from newsletter.core.errors import (
    DatabaseError, DuplicateSubscriberError, EmailDeliveryError,
    UnexpectedSubscribeError,
)
from newsletter.core.subscriber_email import SubscriberEmail
from newsletter.core.subscriber_name import SubscriberName
from newsletter.core.subscription_token import generate_subscription_token
from newsletter.infrastructure.email_client import EmailClient
from newsletter.infrastructure.subscription_repository import (
    SqlSubscriberRepository, SqlSubscriptionTokenRepository,
)

logger = logging.getLogger(__name__)

CONFIRM_PATH = "/api/v1/subscriptions/confirm"
CONFIRMATION_SUBJECT = "Welcome!"


def build_confirmation_link(base_url: str, token: SubscriptionToken) -> str:
    query = urlencode({"subscription_token": token})
    return f"{base_url.rstrip('/')}{CONFIRM_PATH}?{query}"


async def register_subscriber(
    db: AsyncSession,
    email: SubscriberEmail,
    name: SubscriberName,
    email_client: EmailClient,
    base_url: str,
) -> SubscriptionToken:
    """Create a pending subscriber, store its token, send the confirmation email."""
    subscribers = SqlSubscriberRepository(db)
    tokens = SqlSubscriptionTokenRepository(db)

    try:
        if await subscribers.find_by_email(email) is not None:
            raise DuplicateSubscriberError()
        subscriber_id = await subscribers.insert_subscriber(email, name)
        token = generate_subscription_token()
        await tokens.store_token(subscriber_id, token)
        await db.commit()
    except DuplicateSubscriberError:
        await db.rollback()
        raise
    except (DatabaseError, SQLAlchemyError) as e:
        await db.rollback()
        raise UnexpectedSubscribeError(
            "Failed to store new subscriber in the database",
        ) from e

    logger.info("New subscriber saved", extra={"subscriber_id": subscriber_id})

    link = build_confirmation_link(base_url, token)
    try:
        await email_client.send_email(
            email,
            CONFIRMATION_SUBJECT,
            f"Welcome to our newsletter!<br />"
            f"Click <a href=\"{link}\">here</a> to confirm your subscription.",
            f"Welcome to our newsletter!\n"
            f"Visit {link} to confirm your subscription.",
        )
    except EmailDeliveryError as e:
        raise UnexpectedSubscribeError("Failed to send a confirmation email") from e
    return token
