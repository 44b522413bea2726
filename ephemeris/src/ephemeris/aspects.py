"""Aspect detection between tracked bodies."""

from __future__ import annotations

import logging

from lunary.schemas.ephemeris import CelestialSnapshot
from lunary.schemas.events import AspectEvent
from lunary.services.notification_settings import PriorityTable

from ephemeris.bodies import ASPECT_BODIES, ASPECT_WINDOWS, GREAT_CONJUNCTION_PAIR

logger = logging.getLogger(__name__)


def angular_distance(lon1: float, lon2: float) -> float:
    """Calculate the shortest angular distance between two longitudes."""
    diff = abs(lon1 - lon2) % 360.0
    if diff > 180.0:
        diff = 360.0 - diff
    return diff


def classify_separation(separation: float) -> tuple[str, float] | None:
    """Return (aspect type, orb) for a separation in [0, 180], or None."""
    for aspect_type, (angle, max_orb) in ASPECT_WINDOWS.items():
        orb = abs(separation - angle)
        if orb < max_orb:
            return aspect_type, orb
    return None


def aspect_priority(
    aspect_type: str,
    planet_a: str,
    planet_b: str,
    priorities: PriorityTable | None = None,
) -> int:
    priorities = priorities or PriorityTable()
    if aspect_type == "conjunction" and {planet_a, planet_b} == GREAT_CONJUNCTION_PAIR:
        return priorities.great_conjunction
    return priorities.aspect(aspect_type)


def find_aspects(
    snapshot: CelestialSnapshot,
    priorities: PriorityTable | None = None,
) -> list[AspectEvent]:
    """Find all aspects between every unordered pair of aspect bodies.

    Returns:
        Aspect events sorted by descending priority; ties keep pair order.
    """
    priorities = priorities or PriorityTable()
    positions = snapshot.positions
    bodies = [b for b in ASPECT_BODIES if b in positions]
    found: list[AspectEvent] = []

    for i, body1 in enumerate(bodies):
        for body2 in bodies[i + 1:]:
            pos1 = positions[body1]
            pos2 = positions[body2]
            separation = angular_distance(pos1.longitude, pos2.longitude)
            match = classify_separation(separation)
            if match is None:
                continue

            aspect_type, orb = match
            found.append(
                AspectEvent(
                    name=f"{body1}-{body2} {aspect_type}",
                    energy=f"{body1} {aspect_type} {body2}",
                    priority=aspect_priority(aspect_type, body1, body2, priorities),
                    planet_a=body1,
                    planet_b=body2,
                    aspect_type=aspect_type,
                    separation_degrees=round(separation, 1),
                    orb=round(orb, 2),
                    sign_a=pos1.sign,
                    sign_b=pos2.sign,
                )
            )

    found.sort(key=lambda a: a.priority, reverse=True)
    logger.debug("Found %d aspects at %s", len(found), snapshot.timestamp.isoformat())
    return found
