"""Merge detector output, rank it, and pick events for dispatch."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from lunary.schemas.ephemeris import MoonPhaseReading
from lunary.schemas.events import (
    AspectEvent,
    CosmicEvent,
    GeneralEvent,
    IngressEvent,
    MoonEvent,
    RetrogradeEvent,
    SeasonalEvent,
)
from lunary.services.notification_settings import PriorityTable, WorthinessPolicy

from pipeline.notifications.worthiness import EXTRAORDINARY_PRIORITY, is_notification_worthy

logger = logging.getLogger(__name__)

FALLBACK_EVENT_NAME = "Cosmic Flow"


@dataclass(frozen=True)
class RankedEvents:
    primary: CosmicEvent
    secondary: list[CosmicEvent] = field(default_factory=list)

    @property
    def all(self) -> list[CosmicEvent]:
        return [self.primary, *self.secondary]


def moon_event_from_reading(reading: MoonPhaseReading) -> MoonEvent:
    return MoonEvent(
        name=reading.name,
        canonical_name=reading.canonical_name,
        energy=reading.energy,
        priority=reading.priority,
        age_days=round(reading.age_days, 3),
        illumination_percent=reading.illumination_percent,
    )


def aggregate_events(
    moon_phase: MoonPhaseReading | None,
    aspects: Sequence[AspectEvent] = (),
    ingresses: Sequence[IngressEvent] = (),
    retrogrades: Sequence[RetrogradeEvent] = (),
    seasonal: Sequence[SeasonalEvent] = (),
    priorities: PriorityTable | None = None,
) -> list[CosmicEvent]:
    """Concatenate detector output in tie-break order, before ranking."""
    priorities = priorities or PriorityTable()
    events: list[CosmicEvent] = []
    if moon_phase is not None and moon_phase.is_significant:
        events.append(moon_event_from_reading(moon_phase))
    events.extend(a for a in aspects if a.priority >= EXTRAORDINARY_PRIORITY)
    # An equinox or solstice is the Sun entering a cardinal sign; report it once.
    if seasonal:
        ingresses = [i for i in ingresses if i.planet != "Sun"]
    events.extend(ingresses)
    events.extend(retrogrades)
    events.extend(a for a in aspects if a.priority < EXTRAORDINARY_PRIORITY)
    events.extend(seasonal)
    if not events:
        events.append(
            GeneralEvent(
                name=FALLBACK_EVENT_NAME,
                energy="Harmonious Energy",
                priority=priorities.fallback,
            )
        )
    return events


def rank_events(events: Iterable[CosmicEvent]) -> RankedEvents:
    """Sort descending by priority (stable) and split off the primary event."""
    ranked = sorted(events, key=lambda e: e.priority, reverse=True)
    if not ranked:
        raise ValueError("rank_events requires at least one event")
    return RankedEvents(primary=ranked[0], secondary=ranked[1:])


def select_for_dispatch(
    events: Iterable[CosmicEvent],
    limit: int,
    policy: WorthinessPolicy | None = None,
    exclude_keys: Iterable[str] = (),
) -> list[CosmicEvent]:
    """Top ``limit`` notification-worthy events, skipping already-sent keys."""
    excluded = set(exclude_keys)
    selected = []
    for event in events:
        if len(selected) >= limit:
            break
        if event.event_key in excluded:
            continue
        if is_notification_worthy(event, policy):
            selected.append(event)
    return selected
