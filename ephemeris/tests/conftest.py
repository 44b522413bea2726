"""Ephemeris test fixtures."""

from datetime import UTC, datetime

import pytest
from ephemeris.bodies import longitude_to_sign
from lunary.schemas.ephemeris import BodyPosition, CelestialSnapshot


def _position(longitude: float, **flags) -> BodyPosition:
    sign, degree = longitude_to_sign(longitude)
    return BodyPosition(longitude=longitude, sign=sign, degree_in_sign=degree, **flags)


@pytest.fixture
def make_snapshot():
    """Build a snapshot from body longitudes, e.g. make_snapshot(Sun=180.3)."""

    def _make(positions=None, *, phase_angle=45.0, illumination=0.3, **longitudes):
        bodies = {name: _position(lon) for name, lon in longitudes.items()}
        bodies.update(positions or {})
        return CelestialSnapshot(
            timestamp=datetime(2025, 4, 12, 12, 0, tzinfo=UTC),
            positions=bodies,
            moon_illumination=illumination,
            moon_phase_angle=phase_angle,
        )

    return _make


@pytest.fixture
def position():
    return _position
