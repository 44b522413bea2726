"""Equinox and solstice detection from the Sun's longitude."""

from __future__ import annotations

from lunary.schemas.ephemeris import CelestialSnapshot
from lunary.schemas.events import SeasonalEvent
from lunary.services.notification_settings import PriorityTable

SEASONAL_TOLERANCE_DEGREES = 1.0

# (solar longitude, name, energy)
SEASONAL_MARKERS: list[tuple[float, str, str]] = [
    (0.0, "Spring Equinox", "Balance & New Growth"),
    (90.0, "Summer Solstice", "Maximum Solar Power"),
    (180.0, "Autumn Equinox", "Harvest & Reflection"),
    (270.0, "Winter Solstice", "Inner Light & Renewal"),
]


def detect_seasonal_events(
    snapshot: CelestialSnapshot,
    priorities: PriorityTable | None = None,
) -> list[SeasonalEvent]:
    """At most one seasonal marker; the four windows are 88 degrees apart."""
    priorities = priorities or PriorityTable()
    sun = snapshot.positions.get("Sun")
    if sun is None:
        return []

    for marker, name, energy in SEASONAL_MARKERS:
        distance = abs(sun.longitude - marker)
        if marker == 0.0:
            distance = min(distance, abs(sun.longitude - 360.0))
        if distance < SEASONAL_TOLERANCE_DEGREES:
            return [SeasonalEvent(name=name, energy=energy, priority=priorities.seasonal)]
    return []
