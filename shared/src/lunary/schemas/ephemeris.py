"""Pydantic schemas for ephemeris data."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

SYNODIC_MONTH_DAYS = 29.530588853


class BodyPosition(BaseModel):
    """Geocentric ecliptic position of a celestial body."""

    longitude: float = Field(ge=0.0, lt=360.0)
    sign: str
    degree_in_sign: float
    retrograde: bool = False
    station_retrograde: bool = False
    station_direct: bool = False


class CelestialSnapshot(BaseModel):
    """Positions of all tracked bodies at one instant. Never persisted."""

    timestamp: datetime
    positions: dict[str, BodyPosition]
    moon_illumination: float = Field(ge=0.0, le=1.0)
    moon_phase_angle: float = Field(ge=0.0, lt=360.0)


class MoonPhaseReading(BaseModel):
    """Named lunar phase derived from illumination and phase age."""

    name: str
    canonical_name: str
    illumination_percent: float
    age_days: float = Field(ge=0.0, lt=SYNODIC_MONTH_DAYS)
    priority: int
    is_significant: bool
    energy: str = ""
