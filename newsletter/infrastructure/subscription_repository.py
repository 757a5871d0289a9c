"""Subscription Repositories — SQLAlchemy implementations of the core persistence protocols.

Invariants:
    - A missing row is a None result, never an exception
    - Every SQLAlchemy failure is logged here, then raised as DatabaseError chained to it
    - set_confirmed is a single UPDATE committed on its own (idempotent, no row lock)
    - insert_subscriber and store_token only flush; the caller commits both together
    - A unique-email violation on insert is a DuplicateSubscriberError, not a DatabaseError
"""

import logging

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from newsletter.core.domain_types import (
    SubscriberId, SubscriberStatus, SubscriptionToken,
)
from newsletter.core.errors import (
    DatabaseError, DuplicateSubscriberError, ErrorContext,
)
from newsletter.core.subscriber_email import SubscriberEmail
from newsletter.core.subscriber_name import SubscriberName
from newsletter.models.subscription import Subscription
from newsletter.models.subscription_token import SubscriptionTokenRecord

logger = logging.getLogger(__name__)


def _query_failed(e: SQLAlchemyError, operation: str, **context) -> DatabaseError:
    logger.error(
        f"Failed to execute query: {e}", extra={"operation": operation},
    )
    return DatabaseError(
        "Query failed", operation, ErrorContext(operation=operation, **context),
    )


class SqlSubscriptionTokenRepository:
    """Token lookups and inserts over an AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_subscriber_id(
        self, token: SubscriptionToken,
    ) -> SubscriberId | None:
        try:
            result = await self.db.execute(
                select(SubscriptionTokenRecord.subscriber_id)
                .where(SubscriptionTokenRecord.subscription_token == token),
            )
        except SQLAlchemyError as e:
            raise _query_failed(e, "find_subscriber_id") from e
        subscriber_id = result.scalar_one_or_none()
        return SubscriberId(subscriber_id) if subscriber_id is not None else None

    async def store_token(
        self, subscriber_id: SubscriberId, token: SubscriptionToken,
    ) -> None:
        self.db.add(SubscriptionTokenRecord(
            subscription_token=token, subscriber_id=subscriber_id,
        ))
        try:
            await self.db.flush()
        except SQLAlchemyError as e:
            raise _query_failed(
                e, "store_token", subscriber_id=str(subscriber_id),
            ) from e


class SqlSubscriberRepository:
    """Subscriber inserts, lookups and status updates over an AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def set_confirmed(self, subscriber_id: SubscriberId) -> None:
        try:
            await self.db.execute(
                update(Subscription)
                .where(Subscription.id == subscriber_id)
                .values(status=SubscriberStatus.CONFIRMED.value),
            )
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise _query_failed(
                e, "set_confirmed", subscriber_id=str(subscriber_id),
            ) from e

    async def insert_subscriber(
        self, email: SubscriberEmail, name: SubscriberName,
    ) -> SubscriberId:
        subscriber = Subscription(
            email=email.value,
            name=name.value,
            status=SubscriberStatus.PENDING_CONFIRMATION.value,
        )
        self.db.add(subscriber)
        try:
            await self.db.flush()
        except IntegrityError as e:
            logger.warning(
                "Email already registered", extra={"operation": "insert_subscriber"},
            )
            raise DuplicateSubscriberError(
                ErrorContext(operation="insert_subscriber"),
            ) from e
        except SQLAlchemyError as e:
            raise _query_failed(e, "insert_subscriber") from e
        return SubscriberId(subscriber.id)

    async def find_by_email(self, email: SubscriberEmail) -> SubscriberId | None:
        try:
            result = await self.db.execute(
                select(Subscription.id).where(Subscription.email == email.value),
            )
        except SQLAlchemyError as e:
            raise _query_failed(e, "find_by_email") from e
        subscriber_id = result.scalar_one_or_none()
        return SubscriberId(subscriber_id) if subscriber_id is not None else None
