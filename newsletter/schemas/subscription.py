"""Subscription Schemas — Pydantic models for the subscription API boundary.

Invariants:
    - Field shapes only; email/name rules live in SubscriberEmail and SubscriberName
"""

from pydantic import BaseModel, Field


class SubscribeRequest(BaseModel):
    """Registration body."""
    email: str = Field(max_length=320)
    name: str = Field(max_length=1024)
