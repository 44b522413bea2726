"""Pipeline test fixtures."""

from datetime import UTC, datetime

import pytest
from ephemeris.bodies import longitude_to_sign
from lunary.models import Base
from lunary.schemas.ephemeris import BodyPosition, CelestialSnapshot
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool


@pytest.fixture
async def sqlite_engine():
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session_factory(sqlite_engine):
    """Session factory over an empty in-memory database (no tables yet)."""
    return async_sessionmaker(sqlite_engine, expire_on_commit=False)


@pytest.fixture
async def migrated_session_factory(sqlite_engine):
    async with sqlite_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    return async_sessionmaker(sqlite_engine, expire_on_commit=False)


@pytest.fixture
def make_snapshot():
    """Build a snapshot from body longitudes, e.g. make_snapshot(Sun=180.3)."""

    def _make(*, phase_angle=45.0, illumination=0.15, timestamp=None, **longitudes):
        positions = {}
        for name, lon in longitudes.items():
            sign, degree = longitude_to_sign(lon)
            positions[name] = BodyPosition(longitude=lon, sign=sign, degree_in_sign=degree)
        return CelestialSnapshot(
            timestamp=timestamp or datetime(2025, 9, 22, 12, 0, tzinfo=UTC),
            positions=positions,
            moon_illumination=illumination,
            moon_phase_angle=phase_angle,
        )

    return _make
