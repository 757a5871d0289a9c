"""Subscriber Name — validated display name supplied at registration.

Invariants:
    - Not empty or whitespace-only
    - At most MAX_LENGTH characters
    - Contains none of FORBIDDEN_CHARACTERS
"""

from dataclasses import dataclass

from newsletter.core.errors import SubscriberValidationError

MAX_LENGTH = 256
FORBIDDEN_CHARACTERS = frozenset('/()"<>\\{}')


@dataclass(frozen=True)
class SubscriberName:
    """A name safe to store and render in emails."""

    value: str

    @classmethod
    def parse(cls, raw: str) -> "SubscriberName":
        if not raw or not raw.strip():
            raise SubscriberValidationError(
                "Subscriber name cannot be empty.", field="name",
            )
        if len(raw) > MAX_LENGTH:
            raise SubscriberValidationError(
                f"Subscriber name cannot be longer than {MAX_LENGTH} characters.",
                field="name",
            )
        if any(c in FORBIDDEN_CHARACTERS for c in raw):
            raise SubscriberValidationError(
                f"{raw!r} contains forbidden characters.", field="name",
            )
        return cls(raw)

    def __str__(self) -> str:
        return self.value
