"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - SubscriberId wraps a UUID: never use bare UUID in domain logic
    - SubscriptionToken wraps the opaque token string presented by the subscriber
    - Status is written pending on insert and confirmed by set_confirmed; nothing writes it back

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: value is what the `status` column stores
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

SubscriberId = NewType("SubscriberId", UUID)
SubscriptionToken = NewType("SubscriptionToken", str)


# ─── Enums ───────────────────────────────────────────────────────

class SubscriberStatus(str, Enum):
    """Subscriber lifecycle states: maps to DB `status` column."""
    PENDING_CONFIRMATION = "pending_confirmation"
    CONFIRMED = "confirmed"

