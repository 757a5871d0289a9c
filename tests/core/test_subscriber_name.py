"""Subscriber Name — blank, overlong and forbidden-character names are rejected."""

import pytest

from newsletter.core.errors import SubscriberValidationError
from newsletter.core.subscriber_name import (
    FORBIDDEN_CHARACTERS, MAX_LENGTH, SubscriberName,
)


def test_valid_name_is_parsed():
    assert SubscriberName.parse("Ursula Le Guin").value == "Ursula Le Guin"


def test_name_at_max_length_is_valid():
    assert SubscriberName.parse("a" * MAX_LENGTH)


def test_name_longer_than_max_length_is_rejected():
    with pytest.raises(SubscriberValidationError):
        SubscriberName.parse("a" * (MAX_LENGTH + 1))


@pytest.mark.parametrize("raw", ["", " ", "\t\n"])
def test_blank_names_are_rejected(raw):
    with pytest.raises(SubscriberValidationError) as exc_info:
        SubscriberName.parse(raw)
    assert exc_info.value.field == "name"


@pytest.mark.parametrize("char", sorted(FORBIDDEN_CHARACTERS))
def test_forbidden_characters_are_rejected(char):
    with pytest.raises(SubscriberValidationError):
        SubscriberName.parse(f"ursula{char}")
