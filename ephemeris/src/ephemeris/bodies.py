"""Planet definitions, aspect windows, and sign data."""

from __future__ import annotations

import math

# Celestial body IDs for pyswisseph
# These map to swisseph constants
BODY_IDS: dict[str, int] = {
    "Sun": 0,  # SE_SUN
    "Moon": 1,  # SE_MOON
    "Mercury": 2,  # SE_MERCURY
    "Venus": 3,  # SE_VENUS
    "Mars": 4,  # SE_MARS
    "Jupiter": 5,  # SE_JUPITER
    "Saturn": 6,  # SE_SATURN
    "Uranus": 7,  # SE_URANUS
    "Neptune": 8,  # SE_NEPTUNE
    "Pluto": 9,  # SE_PLUTO
}

# Bodies included in every snapshot
TRACKED_BODIES = list(BODY_IDS.keys())

# Bodies checked pairwise for aspects; the Moon re-aspects every few hours
ASPECT_BODIES = [b for b in TRACKED_BODIES if b != "Moon"]

# Luminaries never station
STATIONARY_EXEMPT = {"Sun", "Moon"}

# Zodiac signs in order
SIGNS = [
    "Aries",
    "Taurus",
    "Gemini",
    "Cancer",
    "Leo",
    "Virgo",
    "Libra",
    "Scorpio",
    "Sagittarius",
    "Capricorn",
    "Aquarius",
    "Pisces",
]

# Aspect definitions: name -> (exact angle, orb). Windows must not overlap.
ASPECT_WINDOWS: dict[str, tuple[float, float]] = {
    "conjunction": (0.0, 8.0),
    "sextile": (60.0, 6.0),
    "square": (90.0, 8.0),
    "trine": (120.0, 8.0),
    "opposition": (180.0, 8.0),
}

GREAT_CONJUNCTION_PAIR = frozenset({"Jupiter", "Saturn"})

SIGN_QUALITIES: dict[str, str] = {
    "Aries": "initiating and pioneering",
    "Taurus": "grounding and stabilizing",
    "Gemini": "communicating and adapting",
    "Cancer": "nurturing and protective",
    "Leo": "creative and expressive",
    "Virgo": "practical and analytical",
    "Libra": "harmonizing and diplomatic",
    "Scorpio": "transforming and intense",
    "Sagittarius": "expanding and philosophical",
    "Capricorn": "structuring and ambitious",
    "Aquarius": "innovative and independent",
    "Pisces": "intuitive and compassionate",
}


def normalize_longitude(longitude: float) -> float:
    """Map any longitude onto [0, 360)."""
    value = ((longitude % 360.0) + 360.0) % 360.0
    # -1e-15 % 360 rounds to 360.0 in floating point
    return 0.0 if value >= 360.0 else value


def sign_for_longitude(longitude: float) -> str:
    return SIGNS[math.floor(normalize_longitude(longitude) / 30.0)]


def longitude_to_sign(longitude: float) -> tuple[str, float]:
    """Convert ecliptic longitude to sign and degree within sign."""
    longitude = normalize_longitude(longitude)
    sign_index = math.floor(longitude / 30.0)
    degree = longitude - (sign_index * 30.0)
    return SIGNS[sign_index], degree
