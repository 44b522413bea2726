"""Ledger of cosmic-event notifications already pushed, one row per day and event."""

from __future__ import annotations

import datetime

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    Index,
    Integer,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column

from lunary.models.base import Base


class NotificationSentEvent(Base):
    __tablename__ = "notification_sent_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    event_key: Mapped[str] = mapped_column(Text, nullable=False)
    event_type: Mapped[str] = mapped_column(Text, nullable=False)
    event_name: Mapped[str] = mapped_column(Text, nullable=False)
    event_priority: Mapped[int] = mapped_column(Integer, nullable=False)
    sent_by: Mapped[str] = mapped_column(Text, nullable=False)
    sent_at: Mapped[datetime.datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    __table_args__ = (
        UniqueConstraint("date", "event_key", name="uq_notification_sent_events_date_key"),
        CheckConstraint(
            "sent_by IN ('daily','4-hourly')", name="ck_notification_sent_events_sent_by"
        ),
        Index("idx_notification_sent_events_date", "date"),
        Index("idx_notification_sent_events_event_key", "event_key"),
        Index("idx_notification_sent_events_sent_at", "sent_at"),
    )
