"""Ephemeris adapter - body positions and lunar inputs from pyswisseph."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from functools import lru_cache

import swisseph as swe
from lunary.config import get_settings
from lunary.schemas.ephemeris import BodyPosition, CelestialSnapshot

from ephemeris.bodies import (
    BODY_IDS,
    STATIONARY_EXEMPT,
    TRACKED_BODIES,
    longitude_to_sign,
    normalize_longitude,
)

logger = logging.getLogger(__name__)

MOTION_WINDOW = timedelta(hours=24)


class EphemerisError(RuntimeError):
    """Raised when the ephemeris library cannot produce a position."""


@lru_cache(maxsize=1)
def _configure_swisseph() -> None:
    # Use tropical zodiac, geocentric
    ephe_path = get_settings().swisseph_ephe_path.strip()
    swe.set_ephe_path(ephe_path if ephe_path else None)


def _datetime_to_jd(dt: datetime) -> float:
    """Convert datetime to Julian Day number (UT)."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    utc = dt.astimezone(UTC)
    return swe.julday(
        utc.year,
        utc.month,
        utc.day,
        utc.hour + utc.minute / 60.0 + utc.second / 3600.0 + utc.microsecond / 3.6e9,
    )


def _calc_longitude(body: str, jd: float) -> float:
    """Geocentric ecliptic longitude of ``body`` at Julian Day ``jd``."""
    _configure_swisseph()
    try:
        body_id = BODY_IDS[body]
    except KeyError:
        raise EphemerisError(f"Unknown body '{body}'") from None

    try:
        result, _ = swe.calc_ut(jd, body_id, swe.FLG_SWIEPH)
    except swe.Error:
        # Fallback to Moshier (no external files needed)
        try:
            result, _ = swe.calc_ut(jd, body_id, swe.FLG_MOSEPH)
        except swe.Error as exc:
            raise EphemerisError(f"swisseph failed for {body}: {exc}") from exc
    return normalize_longitude(result[0])


def is_retrograde(longitude_now: float, longitude_past: float) -> bool:
    """Apparent backward motion between two samples, handling the 0/360 wrap."""
    if abs(longitude_now - longitude_past) < 180.0:
        return longitude_now < longitude_past
    return longitude_now > longitude_past


def position(body: str, instant: datetime) -> BodyPosition:
    """Return longitude, sign and motion flags for ``body`` at ``instant``."""
    jd = _datetime_to_jd(instant)
    day = MOTION_WINDOW.total_seconds() / 86400.0

    longitude = _calc_longitude(body, jd)
    longitude_past = _calc_longitude(body, jd - day)
    retrograde = is_retrograde(longitude, longitude_past)

    station_retrograde = False
    station_direct = False
    if body not in STATIONARY_EXEMPT:
        longitude_past_past = _calc_longitude(body, jd - 2 * day)
        was_retrograde = is_retrograde(longitude_past, longitude_past_past)
        station_retrograde = retrograde and not was_retrograde
        station_direct = was_retrograde and not retrograde

    sign, degree = longitude_to_sign(longitude)
    return BodyPosition(
        longitude=longitude,
        sign=sign,
        degree_in_sign=degree,
        retrograde=retrograde,
        station_retrograde=station_retrograde,
        station_direct=station_direct,
    )


def moon_phase_inputs(instant: datetime) -> tuple[float, float]:
    """Return (illumination fraction, phase angle in degrees) for the Moon.

    The phase angle is the Moon's elongation east of the Sun: 0 at New Moon,
    90 at First Quarter, 180 at Full Moon, 270 at Last Quarter.
    """
    jd = _datetime_to_jd(instant)
    sun = _calc_longitude("Sun", jd)
    moon = _calc_longitude("Moon", jd)
    phase_angle = normalize_longitude(moon - sun)

    try:
        attributes = swe.pheno_ut(jd, BODY_IDS["Moon"], swe.FLG_MOSEPH)
    except swe.Error as exc:
        raise EphemerisError(f"swisseph phenomena failed for Moon: {exc}") from exc
    illumination = min(max(float(attributes[1]), 0.0), 1.0)
    return illumination, phase_angle


def calculate_snapshot(instant: datetime | None = None) -> CelestialSnapshot:
    """Positions of every tracked body plus lunar inputs at ``instant``."""
    instant = instant or datetime.now(UTC)
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=UTC)

    positions = {body: position(body, instant) for body in TRACKED_BODIES}
    illumination, phase_angle = moon_phase_inputs(instant)
    logger.debug(
        "Snapshot at %s: sun=%.2f moon=%.2f illumination=%.3f",
        instant.isoformat(),
        positions["Sun"].longitude,
        positions["Moon"].longitude,
        illumination,
    )
    return CelestialSnapshot(
        timestamp=instant,
        positions=positions,
        moon_illumination=illumination,
        moon_phase_angle=phase_angle,
    )
