"""SQLAlchemy ORM models for Lunary."""

from lunary.models.base import Base
from lunary.models.notification_sent_event import NotificationSentEvent

__all__ = [
    "Base",
    "NotificationSentEvent",
]
