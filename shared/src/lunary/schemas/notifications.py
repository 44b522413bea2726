"""Pydantic schemas for notification dispatch and preview responses."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_response(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class NotificationPayload(_CamelModel):
    """Body sent to the push delivery service under ``payload``."""

    type: str
    title: str
    body: str
    data: dict[str, Any] = Field(default_factory=dict)


class EventDispatchResult(_CamelModel):
    event_key: str
    event_name: str
    event_type: str
    priority: int
    success: bool
    duplicate: bool = False
    recipient_count: int = 0
    successful: int = 0
    failed: int = 0
    error: str | None = None


class DispatchSummary(_CamelModel):
    success: bool = True
    sent_by: str
    notifications_sent: int = 0
    primary_event: dict[str, Any] | None = None
    new_events_count: int = 0
    total_events_today: int = 0
    already_sent_today: int = 0
    tracker_available: bool = True
    results: list[EventDispatchResult] = Field(default_factory=list)
    check_time: datetime


class NotificationPreview(_CamelModel):
    title: str
    body: str
    type: str
    priority: int
    event_name: str
    event_key: str
    would_send: bool
