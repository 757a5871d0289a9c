"""Subscriber Email — validated wrapper around a raw email address string.

Invariants:
    - parse() is the only constructor; an existing SubscriberEmail is always well-formed
    - The raw string is kept as given (no case folding, no trimming)

Design Decisions:
    - email-validator for the structural check (same library pydantic's EmailStr uses)
    - Deliverability (DNS) checks disabled: parsing must stay pure and offline
    - Special-use domains (.test, .local, .invalid, ...) are structurally valid and accepted
"""

from dataclasses import dataclass

from email_validator import EmailNotValidError, validate_email

from newsletter.core.errors import SubscriberValidationError


@dataclass(frozen=True)
class SubscriberEmail:
    """A syntactically valid email address."""

    value: str

    @classmethod
    def parse(cls, raw: str) -> "SubscriberEmail":
        if not isinstance(raw, str) or not raw:
            raise SubscriberValidationError(
                f"{raw!r} is not a valid subscriber email.", field="email",
            )
        try:
            validate_email(
                raw, check_deliverability=False, globally_deliverable=False,
            )
        except EmailNotValidError as e:
            raise SubscriberValidationError(
                f"{raw!r} is not a valid subscriber email: {e}", field="email",
            ) from e
        return cls(raw)

    def __str__(self) -> str:
        return self.value
