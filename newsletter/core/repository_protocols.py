"""Boundary Protocols — contracts between core workflows and persistence.

Invariants:
    - Core NEVER imports from shell: dependency arrows point inward only
    - Storage failures surface as DatabaseError; "not found" is a normal None result
    - set_confirmed is idempotent: confirming a confirmed subscriber is a no-op success

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Lookup and mutation are separate calls so an unknown token and a failed
      update stay distinguishable failure classes
"""

from typing import Protocol

from newsletter.core.domain_types import SubscriberId, SubscriptionToken
from newsletter.core.subscriber_email import SubscriberEmail
from newsletter.core.subscriber_name import SubscriberName


class SubscriptionTokenRepository(Protocol):
    """Contract for token persistence: implemented by shell."""
    async def find_subscriber_id(
        self, token: SubscriptionToken,
    ) -> SubscriberId | None: ...
    async def store_token(
        self, subscriber_id: SubscriberId, token: SubscriptionToken,
    ) -> None: ...


class SubscriberRepository(Protocol):
    """Contract for subscriber persistence: implemented by shell."""
    async def set_confirmed(self, subscriber_id: SubscriberId) -> None: ...
    async def insert_subscriber(
        self, email: SubscriberEmail, name: SubscriberName,
    ) -> SubscriberId: ...
    async def find_by_email(
        self, email: SubscriberEmail,
    ) -> SubscriberId | None: ...
