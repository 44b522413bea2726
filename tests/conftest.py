"""Integration test configuration."""

import pytest
from lunary.config import reset_settings_cache
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool


@pytest.fixture(autouse=True)
def fresh_settings():
    reset_settings_cache()
    yield
    reset_settings_cache()


@pytest.fixture
async def session_factory():
    """Empty in-memory ledger database; the tracker creates its own table."""
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    yield async_sessionmaker(engine, expire_on_commit=False)
    await engine.dispose()
