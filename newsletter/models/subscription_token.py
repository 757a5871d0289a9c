"""Subscription Token ORM — maps an opaque token to the subscriber it confirms.

Invariants:
    - subscription_token is the primary key: one token, one subscriber
    - Rows are never updated; expiry and one-time use are not enforced here
"""

import uuid

from sqlalchemy import ForeignKey, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from newsletter.db.base import Base


class SubscriptionTokenRecord(Base):
    __tablename__ = "subscription_tokens"

    subscription_token: Mapped[str] = mapped_column(Text, primary_key=True)
    subscriber_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("subscriptions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    subscriber: Mapped["Subscription"] = relationship(
        "Subscription", back_populates="tokens",
    )
