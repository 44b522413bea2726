"""Cosmic events produced by the detectors and ranked for notification."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class CosmicEventBase(BaseModel):
    name: str
    priority: int
    energy: str = ""

    @property
    def event_key(self) -> str:
        """Idempotency key for the notification ledger."""
        event_type = getattr(self, "type", "") or ""
        name = self.name if self.name and self.name.strip() else "unknown"
        event_type = event_type if event_type.strip() else "unknown"
        return f"{event_type}-{name}-{self.priority}"


class MoonEvent(CosmicEventBase):
    type: Literal["moon"] = "moon"
    canonical_name: str
    age_days: float
    illumination_percent: float


class AspectEvent(CosmicEventBase):
    type: Literal["aspect"] = "aspect"
    planet_a: str
    planet_b: str
    aspect_type: Literal["conjunction", "sextile", "square", "trine", "opposition"]
    separation_degrees: float
    orb: float
    sign_a: str
    sign_b: str


class IngressEvent(CosmicEventBase):
    type: Literal["ingress"] = "ingress"
    planet: str
    sign: str
    degree_in_sign: float


class RetrogradeEvent(CosmicEventBase):
    type: Literal["retrograde"] = "retrograde"
    planet: str
    sign: str
    station: Literal["retrograde", "direct"]


class SeasonalEvent(CosmicEventBase):
    type: Literal["seasonal"] = "seasonal"


class GeneralEvent(CosmicEventBase):
    type: Literal["general"] = "general"


CosmicEvent = Annotated[
    Union[MoonEvent, AspectEvent, IngressEvent, RetrogradeEvent, SeasonalEvent, GeneralEvent],
    Field(discriminator="type"),
]
