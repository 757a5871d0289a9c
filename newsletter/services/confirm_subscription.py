"""Confirmation Workflow — moves a subscriber from pending_confirmation to confirmed.

Invariants:
    - Unknown token -> UnknownTokenError (authorization failure, not a system fault)
    - Storage failure on lookup or update -> UnexpectedConfirmationError, cause chained
    - Confirming an already-confirmed subscriber succeeds (the update is idempotent)

Design Decisions:
    - Lookup and update are two independent statements, no transaction spans them.
      Two requests racing on the same token both issue the same idempotent update.
    - Tokens stay valid after use: no expiry or one-time consumption is enforced
"""

import logging

from newsletter.core.domain_types import SubscriptionToken
from newsletter.core.errors import (
    DatabaseError, ErrorContext, UnexpectedConfirmationError, UnknownTokenError,
)
from newsletter.core.repository_protocols import (
    SubscriberRepository, SubscriptionTokenRepository,
)

logger = logging.getLogger(__name__)


async def confirm_subscription(
    token: str,
    tokens: SubscriptionTokenRepository,
    subscribers: SubscriberRepository,
) -> None:
    """Confirm the subscriber that owns `token`."""
    try:
        subscriber_id = await tokens.find_subscriber_id(SubscriptionToken(token))
    except DatabaseError as e:
        raise UnexpectedConfirmationError(
            "Failed to retrieve subscriber id from token",
        ) from e

    if subscriber_id is None:
        raise UnknownTokenError()

    try:
        await subscribers.set_confirmed(subscriber_id)
    except DatabaseError as e:
        raise UnexpectedConfirmationError(
            "Failed to confirm subscriber",
            ErrorContext(subscriber_id=str(subscriber_id)),
        ) from e

    logger.info(
        "Subscriber confirmed", extra={"subscriber_id": subscriber_id},
    )
