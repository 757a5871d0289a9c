"""Subscription ORM — one row per subscriber.

Invariants:
    - id is a UUID primary key, never reassigned
    - email is unique
    - status is a SubscriberStatus value; only the confirmation workflow sets confirmed
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from newsletter.core.domain_types import SubscriberStatus
from newsletter.db.base import Base


class Subscription(Base):
    __tablename__ = "subscriptions"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    email: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    subscribed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    status: Mapped[str] = mapped_column(
        String(32), nullable=False,
        default=SubscriberStatus.PENDING_CONFIRMATION.value,
    )

    tokens: Mapped[list["SubscriptionTokenRecord"]] = relationship(
        "SubscriptionTokenRecord", back_populates="subscriber",
        cascade="all, delete-orphan",
    )
