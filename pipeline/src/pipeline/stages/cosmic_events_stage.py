"""Cosmic event stage: ephemeris snapshot, detectors, ranking."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime

from ephemeris.aspects import find_aspects
from ephemeris.calculator import calculate_snapshot
from ephemeris.ingress import detect_ingresses, detect_retrograde_stations
from ephemeris.lunar import calculate_moon_phase
from ephemeris.seasonal import detect_seasonal_events
from lunary.schemas.ephemeris import CelestialSnapshot, MoonPhaseReading
from lunary.services.notification_settings import PriorityTable

from pipeline.notifications.aggregator import RankedEvents, aggregate_events, rank_events

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CosmicEventsResult:
    snapshot: CelestialSnapshot
    moon_phase: MoonPhaseReading
    ranked: RankedEvents


def events_from_snapshot(
    snapshot: CelestialSnapshot,
    priorities: PriorityTable | None = None,
    month: int | None = None,
) -> CosmicEventsResult:
    """Run every detector over an already computed snapshot.

    ``month`` is the local calendar month used to name a full moon.
    """
    priorities = priorities or PriorityTable()
    moon_phase = calculate_moon_phase(
        snapshot.moon_illumination,
        snapshot.moon_phase_angle,
        snapshot.timestamp,
        priorities,
        month,
    )
    events = aggregate_events(
        moon_phase,
        aspects=find_aspects(snapshot, priorities),
        ingresses=detect_ingresses(snapshot, priorities),
        retrogrades=detect_retrograde_stations(snapshot, priorities),
        seasonal=detect_seasonal_events(snapshot, priorities),
        priorities=priorities,
    )
    ranked = rank_events(events)
    logger.info(
        "Computed %d cosmic events at %s; primary '%s' (priority %d)",
        len(events),
        snapshot.timestamp.isoformat(),
        ranked.primary.name,
        ranked.primary.priority,
    )
    return CosmicEventsResult(snapshot=snapshot, moon_phase=moon_phase, ranked=ranked)


def compute_cosmic_events(
    instant: datetime | None = None,
    priorities: PriorityTable | None = None,
    month: int | None = None,
) -> CosmicEventsResult:
    """Fresh snapshot at ``instant`` (default now) ranked into cosmic events."""
    snapshot = calculate_snapshot(instant or datetime.now(UTC))
    return events_from_snapshot(snapshot, priorities, month)
