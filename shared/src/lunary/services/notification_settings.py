"""Notification settings -- typed Pydantic groups built from environment settings."""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from lunary.config import Settings, get_settings

PriorityEightScope = Literal["all", "seasonal_only"]


class PriorityTable(BaseModel):
    """Event priorities shared by every caller that ranks or pushes events.

    Ingress, retrograde and seasonal values are read from the environment.
    """

    new_moon: int = 10
    quarter_moon: int = 10
    full_moon: int = 10
    minor_moon: int = 2
    conjunction: int = 7
    great_conjunction: int = 9
    sextile: int = 5
    square: int = 6
    trine: int = 6
    opposition: int = 6
    ingress: int = 8
    retrograde: int = 8
    seasonal: int = 8
    fallback: int = 1

    def aspect(self, aspect_type: str) -> int:
        return int(getattr(self, aspect_type))


class WorthinessPolicy(BaseModel):
    # "all": every priority-8 event qualifies; "seasonal_only": only seasonal ones
    priority_eight_scope: PriorityEightScope = "all"
    outer_planets: list[str] = Field(
        default=["Jupiter", "Saturn", "Uranus", "Neptune", "Pluto"]
    )
    significant_moon_phases: list[str] = Field(
        default=["New Moon", "Full Moon", "First Quarter", "Last Quarter"]
    )


class SelectionLimits(BaseModel):
    preview: int = Field(default=5, ge=1)
    sweep: int = Field(default=2, ge=1)
    daily: int = Field(default=2, ge=1)

    def for_sender(self, sent_by: str) -> int:
        return self.daily if sent_by == "daily" else self.sweep


class NotificationSettings(BaseModel):
    priorities: PriorityTable = Field(default_factory=PriorityTable)
    worthiness: WorthinessPolicy = Field(default_factory=WorthinessPolicy)
    limits: SelectionLimits = Field(default_factory=SelectionLimits)
    retention_days: int = Field(default=1, ge=0)
    timezone: str = "UTC"


def load_notification_settings(settings: Settings | None = None) -> NotificationSettings:
    """Build notification settings from environment-backed application settings."""
    settings = settings or get_settings()
    return NotificationSettings(
        priorities=PriorityTable(
            ingress=settings.notify_ingress_priority,
            retrograde=settings.notify_retrograde_priority,
            seasonal=settings.notify_seasonal_priority,
        ),
        worthiness=WorthinessPolicy(
            priority_eight_scope=settings.notify_priority_eight_scope,
        ),
        limits=SelectionLimits(
            preview=settings.notify_preview_max_events,
            sweep=settings.notify_sweep_max_events,
            daily=settings.notify_daily_max_events,
        ),
        retention_days=settings.notify_retention_days,
        timezone=settings.timezone,
    )

