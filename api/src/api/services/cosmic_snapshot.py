"""Public cosmic snapshot document for a calendar date."""

from __future__ import annotations

from datetime import UTC, date, datetime, time
from typing import Any

from lunary.services.notification_settings import load_notification_settings
from pipeline.notifications.templates import classify
from pipeline.stages.cosmic_events_stage import CosmicEventsResult, compute_cosmic_events

HIGHLIGHT_LIMIT = 3


def snapshot_instant(day: date) -> datetime:
    """Noon UTC, so one date always maps to one document."""
    return datetime.combine(day, time(12, 0), tzinfo=UTC)


def _horoscope_snippet(result: CosmicEventsResult) -> str:
    primary = result.ranked.primary
    moon = result.snapshot.positions.get("Moon")
    copy = classify(primary, moon.sign if moon else None)
    phase = result.moon_phase.name
    if primary.type == "moon":
        return copy.body
    return f"{copy.body}. The {phase} colours the day."


def build_cosmic_snapshot(result: CosmicEventsResult, day: date) -> dict[str, Any]:
    primary = result.ranked.primary
    moon = result.snapshot.positions.get("Moon")
    moon_sign = moon.sign if moon else None
    highlights = []
    for event in result.ranked.all[:HIGHLIGHT_LIMIT]:
        copy = classify(event, moon_sign)
        highlights.append(f"{copy.title}: {copy.body}")

    planets = {
        name: {
            "sign": position.sign,
            "longitude": round(position.longitude, 4),
            "degreeInSign": round(position.degree_in_sign, 2),
            "retrograde": position.retrograde,
        }
        for name, position in result.snapshot.positions.items()
    }
    return {
        "date": day.isoformat(),
        "primaryEvent": {"name": primary.name, "energy": primary.energy},
        "highlights": highlights,
        "horoscopeSnippet": _horoscope_snippet(result),
        "astronomicalData": {
            "planets": planets,
            "moonPhase": {
                "name": result.moon_phase.name,
                "illumination": result.moon_phase.illumination_percent,
                "age": round(result.moon_phase.age_days, 2),
            },
            "primaryEvent": primary.model_dump(mode="json", by_alias=True),
        },
    }


def get_cosmic_snapshot(day: date) -> dict[str, Any]:
    priorities = load_notification_settings().priorities
    result = compute_cosmic_events(snapshot_instant(day), priorities, day.month)
    return build_cosmic_snapshot(result, day)
