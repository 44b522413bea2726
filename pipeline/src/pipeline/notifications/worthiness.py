"""Notification-worthiness predicate shared by the preview, sweep and digest."""

from __future__ import annotations

from lunary.schemas.events import CosmicEvent
from lunary.services.notification_settings import WorthinessPolicy

EXTRAORDINARY_PRIORITY = 9
EXACT_MOON_PRIORITY = 10
SEASONAL_BUCKET_PRIORITY = 8
MAJOR_ASPECT_PRIORITY = 7


def is_notification_worthy(
    event: CosmicEvent,
    policy: WorthinessPolicy | None = None,
) -> bool:
    policy = policy or WorthinessPolicy()
    priority = event.priority or 0

    # Extraordinary planetary events
    if priority >= EXTRAORDINARY_PRIORITY:
        return True

    # Exact moon phases; the traditional full moon name is not matched here
    if event.type == "moon" and priority == EXACT_MOON_PRIORITY:
        phase = getattr(event, "canonical_name", "") or event.name
        if any(name in phase for name in policy.significant_moon_phases):
            return True

    if priority == SEASONAL_BUCKET_PRIORITY:
        if policy.priority_eight_scope == "all" or event.type == "seasonal":
            return True

    # Major aspects involving outer planets
    if event.type == "aspect" and priority >= MAJOR_ASPECT_PRIORITY:
        text = f"{event.name} {event.energy}".lower()
        return any(planet.lower() in text for planet in policy.outer_planets)

    return False
