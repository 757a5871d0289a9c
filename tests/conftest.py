"""Root conftest — shared settings and database fixtures.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - Settings are built in memory; no test reads configuration/ unless it says so
"""

import os

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)

from newsletter.config import Settings
from newsletter.db.base import Base
from newsletter.models.subscription import Subscription
from newsletter.models.subscription_token import SubscriptionTokenRecord

# Ensure tests never select a developer's production override
os.environ.setdefault("APP_ENVIRONMENT", "local")

DATABASE_PASSWORD = "db-password-do-not-log"
POSTMARK_TOKEN = "postmark-token-do-not-log"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        database={
            "host": "127.0.0.1",
            "port": 5432,
            "username": "postgres",
            "password": DATABASE_PASSWORD,
            "database_name": "newsletter_test",
        },
        application={
            "host": "127.0.0.1",
            "port": 8000,
            "base_url": "http://127.0.0.1:8000",
            "log_format": "text",
        },
        email_client={
            "base_url": "https://email.provider.io",
            "sender_email": "noreply@newsletter.io",
            "authorization_token": POSTMARK_TOKEN,
            "timeout_milliseconds": 200,
        },
    )


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def seed_subscriber(test_db):
    """Insert a pending subscriber with token 'valid-token'."""
    subscriber = Subscription(
        email="ursula_le_guin@gmail.com",
        name="le guin",
        status="pending_confirmation",
    )
    test_db.add(subscriber)
    await test_db.flush()
    test_db.add(SubscriptionTokenRecord(
        subscription_token="valid-token", subscriber_id=subscriber.id,
    ))
    await test_db.commit()
    return subscriber
