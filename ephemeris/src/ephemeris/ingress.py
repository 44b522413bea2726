"""Sign ingress and retrograde station detection."""

from __future__ import annotations

from lunary.schemas.ephemeris import CelestialSnapshot
from lunary.schemas.events import IngressEvent, RetrogradeEvent
from lunary.services.notification_settings import PriorityTable

# Degrees past a sign boundary that still count as "entering" the sign
INGRESS_THRESHOLD_DEGREES = 2.0


def detect_ingresses(
    snapshot: CelestialSnapshot,
    priorities: PriorityTable | None = None,
) -> list[IngressEvent]:
    priorities = priorities or PriorityTable()
    events = []
    for planet, pos in snapshot.positions.items():
        degree_in_sign = pos.longitude % 30.0
        if degree_in_sign < INGRESS_THRESHOLD_DEGREES:
            events.append(
                IngressEvent(
                    name=f"{planet} enters {pos.sign}",
                    energy=f"{planet} energy shifts",
                    priority=priorities.ingress,
                    planet=planet,
                    sign=pos.sign,
                    degree_in_sign=round(degree_in_sign, 2),
                )
            )
    return events


def detect_retrograde_stations(
    snapshot: CelestialSnapshot,
    priorities: PriorityTable | None = None,
) -> list[RetrogradeEvent]:
    """Bodies whose apparent direction of motion flipped in the last day."""
    priorities = priorities or PriorityTable()
    events = []
    for planet, pos in snapshot.positions.items():
        if pos.station_retrograde:
            events.append(
                RetrogradeEvent(
                    name=f"{planet} Retrograde Begins",
                    energy=f"{planet} stations retrograde in {pos.sign}",
                    priority=priorities.retrograde,
                    planet=planet,
                    sign=pos.sign,
                    station="retrograde",
                )
            )
        elif pos.station_direct:
            events.append(
                RetrogradeEvent(
                    name=f"{planet} Retrograde Ends",
                    energy=f"{planet} stations direct in {pos.sign}",
                    priority=priorities.retrograde,
                    planet=planet,
                    sign=pos.sign,
                    station="direct",
                )
            )
    return events
