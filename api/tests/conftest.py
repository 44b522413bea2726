"""API test configuration."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from api.dependencies import get_push_client, get_tracker
from api.main import create_app
from httpx import ASGITransport, AsyncClient
from lunary.config import reset_settings_cache
from pipeline.notifications.push_client import SendResult
from pipeline.notifications.tracker import SentEvents

CRON_SECRET = "test-cron-secret"


@pytest.fixture(autouse=True)
def cron_secret(monkeypatch):
    monkeypatch.setenv("CRON_SECRET", CRON_SECRET)
    reset_settings_cache()
    yield CRON_SECRET
    reset_settings_cache()


@pytest.fixture
def mock_tracker():
    tracker = MagicMock()
    tracker.get_sent_events = AsyncMock(return_value=SentEvents.ok(frozenset()))
    tracker.initialize = AsyncMock(return_value=True)
    return tracker


@pytest.fixture
def mock_push_client():
    client = MagicMock()
    client.send = AsyncMock(
        return_value=SendResult(success=True, recipient_count=1, successful=1, failed=0)
    )
    client.close = AsyncMock()
    return client


@pytest.fixture
def app(mock_tracker, mock_push_client):
    a = create_app()
    a.dependency_overrides[get_tracker] = lambda: mock_tracker
    a.dependency_overrides[get_push_client] = lambda: mock_push_client
    return a


@pytest.fixture
async def client(app):
    """Client that sends the cron bearer token."""
    transport = ASGITransport(app=app)
    headers = {"Authorization": f"Bearer {CRON_SECRET}"}
    async with AsyncClient(transport=transport, base_url="http://test", headers=headers) as ac:
        yield ac


@pytest.fixture
async def unauthenticated_client(app):
    """Client with no Authorization header."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
