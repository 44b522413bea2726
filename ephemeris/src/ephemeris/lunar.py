"""Lunar phase classification from phase angle and illumination."""

from __future__ import annotations

import logging
from datetime import datetime

from lunary.schemas.ephemeris import SYNODIC_MONTH_DAYS, MoonPhaseReading
from lunary.services.notification_settings import PriorityTable

logger = logging.getLogger(__name__)

# Tight windows around the four exact phases, in days of lunar age (inclusive)
NEW_MOON_MAX_AGE = 0.5
FIRST_QUARTER_WINDOW = (7.2, 7.6)
FULL_MOON_WINDOW = (14.5, 15.5)
LAST_QUARTER_WINDOW = (22.0, 22.4)

# Traditional full moon names by month
FULL_MOON_NAMES: dict[int, str] = {
    1: "Wolf Moon",
    2: "Snow Moon",
    3: "Worm Moon",
    4: "Pink Moon",
    5: "Flower Moon",
    6: "Strawberry Moon",
    7: "Buck Moon",
    8: "Sturgeon Moon",
    9: "Harvest Moon",
    10: "Hunter Moon",
    11: "Beaver Moon",
    12: "Cold Moon",
}

PHASE_ENERGY: dict[str, str] = {
    "New Moon": "New Beginnings",
    "Waxing Crescent": "Growing Energy",
    "First Quarter": "Action & Decision",
    "Waxing Gibbous": "Building Power",
    "Full Moon": "Peak Power",
    "Waning Gibbous": "Gratitude & Wisdom",
    "Last Quarter": "Release & Letting Go",
    "Waning Crescent": "Rest & Reflection",
}


def age_from_phase_angle(phase_angle: float) -> float:
    """Convert the Moon-Sun elongation (degrees) to lunar age in days."""
    return normalize_age((phase_angle % 360.0) / 360.0 * SYNODIC_MONTH_DAYS)


def normalize_age(age_days: float) -> float:
    age = age_days % SYNODIC_MONTH_DAYS
    return 0.0 if age >= SYNODIC_MONTH_DAYS else age


def canonical_phase_name(age_days: float) -> str:
    """Exactly one of the eight canonical phase names for any lunar age."""
    age = normalize_age(age_days)
    if age < NEW_MOON_MAX_AGE:
        return "New Moon"
    if FIRST_QUARTER_WINDOW[0] <= age <= FIRST_QUARTER_WINDOW[1]:
        return "First Quarter"
    if FULL_MOON_WINDOW[0] <= age <= FULL_MOON_WINDOW[1]:
        return "Full Moon"
    if LAST_QUARTER_WINDOW[0] <= age <= LAST_QUARTER_WINDOW[1]:
        return "Last Quarter"
    if age < FIRST_QUARTER_WINDOW[0]:
        return "Waxing Crescent"
    if age < FULL_MOON_WINDOW[0]:
        return "Waxing Gibbous"
    if age < LAST_QUARTER_WINDOW[0]:
        return "Waning Gibbous"
    return "Waning Crescent"


def moon_phase_from_age(
    age_days: float,
    month: int,
    illumination_percent: float = 0.0,
    priorities: PriorityTable | None = None,
) -> MoonPhaseReading:
    """Classify a lunar age into a named phase.

    Full moons take the traditional name for ``month`` ("Pink Moon" in April)
    and keep "Full Moon" as their canonical name.
    """
    priorities = priorities or PriorityTable()
    age = normalize_age(age_days)
    canonical = canonical_phase_name(age)

    name = canonical
    if canonical == "New Moon":
        priority = priorities.new_moon
    elif canonical == "Full Moon":
        name = FULL_MOON_NAMES.get(month, "Full Moon")
        priority = priorities.full_moon
    elif canonical in ("First Quarter", "Last Quarter"):
        priority = priorities.quarter_moon
    else:
        priority = priorities.minor_moon

    return MoonPhaseReading(
        name=name,
        canonical_name=canonical,
        illumination_percent=round(illumination_percent, 2),
        age_days=age,
        priority=priority,
        is_significant=canonical in ("New Moon", "First Quarter", "Full Moon", "Last Quarter"),
        energy=PHASE_ENERGY[canonical],
    )


def calculate_moon_phase(
    illumination: float,
    phase_angle: float,
    instant: datetime,
    priorities: PriorityTable | None = None,
    month: int | None = None,
) -> MoonPhaseReading:
    """Moon phase reading from illumination fraction (0..1) and phase angle.

    ``month`` names the full moon; it defaults to the month of ``instant``.
    Callers keyed on a local calendar date pass that date's month.
    """
    reading = moon_phase_from_age(
        age_from_phase_angle(phase_angle),
        month or instant.month,
        illumination_percent=illumination * 100.0,
        priorities=priorities,
    )
    logger.debug("Moon age %.2f days: %s", reading.age_days, reading.name)
    return reading
