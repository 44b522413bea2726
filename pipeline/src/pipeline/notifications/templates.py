"""Title and body copy for cosmic-event push notifications.

Shared by the preview and both dispatch paths.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ephemeris.bodies import SIGN_QUALITIES
from lunary.schemas.events import CosmicEvent
from lunary.schemas.notifications import NotificationPayload

DEFAULT_TITLE = "Cosmic Event"
DEFAULT_BODY = "Significant cosmic event occurring"

ASPECT_ACTIONS: dict[str, str] = {
    "conjunction": "unite their energies",
    "trine": "flow harmoniously together",
    "square": "create dynamic tension",
    "sextile": "offer cooperative opportunities",
    "opposition": "seek balance between",
}

MOON_DESCRIPTIONS: dict[str, str] = {
    "New Moon": (
        "A powerful reset point for manifestation and new beginnings. "
        "Set intentions aligned with your deeper purpose."
    ),
    "Full Moon": (
        "Peak illumination brings clarity to accomplishments and reveals "
        "areas ready for release and transformation."
    ),
    "First Quarter": "A critical decision point supporting decisive action and breakthrough moments.",
    "Last Quarter": "A time for reflection, release, and preparing for the next lunar cycle.",
}

RETROGRADE_MEANINGS: dict[str, str] = {
    "Mercury": "invites reflection on communication, technology, and mental patterns",
    "Venus": "encourages review of relationships, values, and what brings beauty",
    "Mars": "suggests revisiting action, motivation, and how we channel energy",
    "Jupiter": "invites reflection on expansion, growth, and philosophical beliefs",
    "Saturn": "encourages review of structures, responsibilities, and long-term goals",
    "Uranus": "brings revolutionary reflection on change, innovation, and freedom",
    "Neptune": "invites reflection on dreams, intuition, and spiritual connection",
    "Pluto": "encourages deep transformation through shadow work and renewal",
}


@dataclass(frozen=True)
class NotificationCopy:
    title: str
    body: str


def _moon_body(event: CosmicEvent, moon_sign: str | None) -> str:
    phase = getattr(event, "canonical_name", "") or event.name
    description = next(
        (text for name, text in MOON_DESCRIPTIONS.items() if name in phase),
        "Lunar energy shift creating new opportunities for growth",
    )
    if moon_sign:
        return f"Moon in {moon_sign}: {description}"
    return description


def _aspect_copy(event: CosmicEvent) -> NotificationCopy:
    planet_a = getattr(event, "planet_a", "")
    planet_b = getattr(event, "planet_b", "")
    aspect_type = getattr(event, "aspect_type", "")
    if not (planet_a and planet_b and aspect_type):
        return NotificationCopy(
            event.name or "Planetary Aspect",
            "Powerful cosmic alignment creating new opportunities",
        )
    action = ASPECT_ACTIONS.get(aspect_type, "align")
    return NotificationCopy(
        f"{planet_a}-{planet_b} {aspect_type.capitalize()}",
        f"{planet_a} and {planet_b} {action}, creating powerful cosmic influence",
    )


def _ingress_copy(event: CosmicEvent) -> NotificationCopy:
    planet = getattr(event, "planet", "")
    sign = getattr(event, "sign", "")
    if not (planet and sign):
        return NotificationCopy(
            event.name or "Planetary Ingress",
            "Planetary energy shift creating new opportunities",
        )
    quality = SIGN_QUALITIES.get(sign)
    if quality:
        body = f"This amplifies focus on {sign} themes, {quality}"
    else:
        body = f"This amplifies focus on {sign} themes and energies"
    return NotificationCopy(f"{planet} Enters {sign}", body)


def _retrograde_copy(event: CosmicEvent) -> NotificationCopy:
    planet = getattr(event, "planet", "")
    sign = getattr(event, "sign", "")
    if getattr(event, "station", "retrograde") == "direct":
        meaning = "brings forward momentum as review turns into action"
    else:
        meaning = RETROGRADE_MEANINGS.get(planet, "invites reflection and review")
    body = f"This {meaning} in {sign}" if sign else f"This {meaning}"
    return NotificationCopy(event.name or "Planetary Retrograde", body)


def _seasonal_body(name: str) -> str:
    if "Equinox" in name:
        return (
            "Equal day and night mark a powerful balance point, "
            "supporting new beginnings and equilibrium"
        )
    if "Solstice" in name:
        return (
            "Peak daylight or darkness marks a turning point, "
            "supporting reflection and seasonal transition"
        )
    return "Seasonal energy shift brings new themes and opportunities for growth"


def classify(event: CosmicEvent, moon_sign: str | None = None) -> NotificationCopy:
    """Title and body for ``event``."""
    name = event.name.strip() if event.name else ""

    if event.type == "moon":
        return NotificationCopy(name or "Moon Phase", _moon_body(event, moon_sign))
    if event.type == "aspect":
        return _aspect_copy(event)
    if event.type == "ingress":
        return _ingress_copy(event)
    if event.type == "retrograde":
        return _retrograde_copy(event)
    if event.type == "seasonal":
        return NotificationCopy(name or "Seasonal Event", _seasonal_body(name))
    return NotificationCopy(name or DEFAULT_TITLE, event.energy.strip() or DEFAULT_BODY)


def build_payload(
    event: CosmicEvent,
    date_context: date,
    moon_sign: str | None = None,
) -> NotificationPayload:
    """Broadcast payload for the push delivery service."""
    copy = classify(event, moon_sign)
    return NotificationPayload(
        type=event.type,
        title=copy.title,
        body=copy.body,
        data={
            "url": "/",
            "date": date_context.isoformat(),
            "eventType": event.type,
            "eventName": event.name,
            "eventKey": event.event_key,
            "priority": event.priority,
            "tag": f"lunary-{event.type}",
        },
    )
