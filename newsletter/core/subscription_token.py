"""Subscription Token — generation of opaque, unguessable confirmation tokens."""

import secrets
import string

from newsletter.core.domain_types import SubscriptionToken

TOKEN_LENGTH = 25
_ALPHABET = string.ascii_letters + string.digits


def generate_subscription_token() -> SubscriptionToken:
    """25 case-sensitive alphanumerics from the OS CSPRNG (~148 bits)."""
    return SubscriptionToken(
        "".join(secrets.choice(_ALPHABET) for _ in range(TOKEN_LENGTH)),
    )
