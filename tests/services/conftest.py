"""Service test fixtures — FastAPI test client over the in-memory database.

Invariants:
    - get_db dependency overridden to use the test DB session factory
    - get_email_client overridden with a FakeEmailClient
    - db_manager patched for code paths that bypass get_db (readiness probe)

Design Decisions:
    - ASGITransport does not run the lifespan, so no real pool or HTTP client is built
"""

import pytest
from httpx import ASGITransport, AsyncClient

import newsletter.infrastructure.database as db_module
from newsletter.api.deps import get_email_client
from newsletter.infrastructure.database import get_db, DatabaseSessionManager
from newsletter.main import create_app

from tests.services.fake_email_client import FakeEmailClient


@pytest.fixture
def email_client():
    return FakeEmailClient()


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
async def client(app, test_engine, test_session_factory, email_client):
    """FastAPI test client with DB and email dependencies overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_email_client] = lambda: email_client

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
