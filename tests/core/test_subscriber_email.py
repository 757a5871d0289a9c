"""Subscriber Email — structural validation at construction time.

Invariants:
    - local@domain.tld shapes parse and keep the raw string
    - Special-use and reserved domains are accepted: only structure is checked
    - Empty, missing '@', empty local part, empty domain are rejected with field='email'
"""

import pytest

from newsletter.core.errors import SubscriberValidationError
from newsletter.core.subscriber_email import SubscriberEmail

LOCAL_PARTS = ["ursula", "le.guin", "first_last", "a+newsletter", "x1"]
DOMAINS = [
    "gmail.com", "mail.newsletter.io", "univ.edu", "b-c.org",
    "mail.test", "host.localhost", "corp.local", "shop.invalid", "b.onion",
]


@pytest.mark.parametrize("local", LOCAL_PARTS)
@pytest.mark.parametrize("domain", DOMAINS)
def test_well_formed_emails_are_parsed(local, domain):
    raw = f"{local}@{domain}"
    email = SubscriberEmail.parse(raw)
    assert email.value == raw
    assert str(email) == raw


@pytest.mark.parametrize("raw", [
    "",
    "ursuladomain.com",
    "@domain.com",
    "ursula@",
    "ursula le guin@domain.com",
])
def test_malformed_emails_are_rejected(raw):
    with pytest.raises(SubscriberValidationError) as exc_info:
        SubscriberEmail.parse(raw)
    assert exc_info.value.field == "email"
    assert exc_info.value.http_status == 400


def test_case_is_preserved():
    assert SubscriberEmail.parse("Ursula@Gmail.com").value == "Ursula@Gmail.com"


def test_value_is_immutable():
    email = SubscriberEmail.parse("ursula@gmail.com")
    with pytest.raises(AttributeError):
        email.value = "not-an-email"
