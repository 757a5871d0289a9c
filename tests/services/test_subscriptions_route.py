"""Subscribe Route — registration, confirmation email, and the full double opt-in loop.

Invariants:
    - Valid body -> 200, pending subscriber + token stored, one email with the confirm link
    - Invalid email/name or missing fields -> 400, nothing stored, no email
    - Known email -> 409
    - Losing a registration race on the unique email -> 409, not 500
    - Email provider failure -> 500
"""

import re
from urllib.parse import parse_qs, urlparse

from sqlalchemy import func, select

from newsletter.core.errors import EmailDeliveryError
from newsletter.infrastructure.subscription_repository import SqlSubscriberRepository
from newsletter.models.subscription import Subscription
from newsletter.models.subscription_token import SubscriptionTokenRecord

SUBSCRIBE_URL = "/api/v1/subscriptions"
VALID_BODY = {"email": "ursula_le_guin@gmail.com", "name": "le guin"}


def _confirmation_link(text: str) -> str:
    links = re.findall(r"https?://\S+", text)
    assert len(links) == 1
    return links[0]


async def _count(db, model) -> int:
    result = await db.execute(select(func.count()).select_from(model))
    return result.scalar_one()


async def test_valid_subscription_is_stored_as_pending(client, test_db):
    res = await client.post(SUBSCRIBE_URL, json=VALID_BODY)
    assert res.status_code == 200

    result = await test_db.execute(select(Subscription.email, Subscription.name, Subscription.status))
    assert [tuple(row) for row in result.all()] == [
        ("ursula_le_guin@gmail.com", "le guin", "pending_confirmation"),
    ]
    assert await _count(test_db, SubscriptionTokenRecord) == 1


async def test_valid_subscription_sends_confirmation_link(client, email_client, test_db, settings):
    await client.post(SUBSCRIBE_URL, json=VALID_BODY)

    assert len(email_client.sent) == 1
    message = email_client.sent[0]
    assert message["recipient"] == "ursula_le_guin@gmail.com"

    link = urlparse(_confirmation_link(message["text"]))
    assert f"{link.scheme}://{link.netloc}" == settings.application.base_url
    assert link.path == "/api/v1/subscriptions/confirm"
    token = parse_qs(link.query)["subscription_token"][0]

    result = await test_db.execute(select(SubscriptionTokenRecord.subscription_token))
    assert result.scalar_one() == token
    assert token in message["html"]


async def test_following_the_link_confirms_the_subscriber(client, email_client, test_db):
    await client.post(SUBSCRIBE_URL, json=VALID_BODY)
    link = urlparse(_confirmation_link(email_client.sent[0]["text"]))

    res = await client.get(f"{link.path}?{link.query}")
    assert res.status_code == 200

    result = await test_db.execute(select(Subscription.status))
    assert result.scalar_one() == "confirmed"


async def test_invalid_email_is_rejected(client, email_client, test_db):
    res = await client.post(SUBSCRIBE_URL, json={"email": "definitely-not-an-email", "name": "le guin"})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"
    assert email_client.sent == []
    assert await _count(test_db, Subscription) == 0


async def test_invalid_name_is_rejected(client, email_client):
    res = await client.post(SUBSCRIBE_URL, json={"email": "ursula@gmail.com", "name": "<script>"})
    assert res.status_code == 400
    assert email_client.sent == []


async def test_missing_fields_are_rejected(client):
    for body in ({"name": "le guin"}, {"email": "ursula@gmail.com"}, {}):
        res = await client.post(SUBSCRIBE_URL, json=body)
        assert res.status_code == 400


async def test_duplicate_email_is_conflict(client, email_client):
    assert (await client.post(SUBSCRIBE_URL, json=VALID_BODY)).status_code == 200
    res = await client.post(SUBSCRIBE_URL, json=VALID_BODY)
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "DUPLICATE_SUBSCRIBER"
    assert len(email_client.sent) == 1


async def test_concurrent_duplicate_is_conflict(client, email_client, test_db, seed_subscriber, monkeypatch):
    async def not_found_yet(self, email):
        return None

    monkeypatch.setattr(SqlSubscriberRepository, "find_by_email", not_found_yet)

    res = await client.post(SUBSCRIBE_URL, json=VALID_BODY)
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "DUPLICATE_SUBSCRIBER"
    assert email_client.sent == []
    assert await _count(test_db, Subscription) == 1
    assert await _count(test_db, SubscriptionTokenRecord) == 1


async def test_email_failure_returns_500(client, email_client):
    email_client.fail_with = EmailDeliveryError("status 503", "status")
    res = await client.post(SUBSCRIBE_URL, json=VALID_BODY)
    assert res.status_code == 500
    assert res.json()["error"]["code"] == "SUBSCRIBE_FAILED"
    assert "503" not in res.text
