"""Notification dispatch: one pass of the 4-hourly sweep or the daily digest."""

from __future__ import annotations

import logging
from datetime import UTC, date, datetime
from zoneinfo import ZoneInfo

from lunary.schemas.events import CosmicEvent
from lunary.schemas.notifications import DispatchSummary, EventDispatchResult
from lunary.services.notification_settings import (
    NotificationSettings,
    load_notification_settings,
)

from pipeline.notifications.aggregator import select_for_dispatch
from pipeline.notifications.push_client import PushClient
from pipeline.notifications.templates import build_payload
from pipeline.notifications.tracker import ClaimOutcome, NotificationTracker
from pipeline.notifications.worthiness import is_notification_worthy
from pipeline.stages.cosmic_events_stage import compute_cosmic_events

logger = logging.getLogger(__name__)


def local_date(instant: datetime, timezone_name: str) -> date:
    """Calendar date of ``instant`` in the configured timezone."""
    if instant.tzinfo is None:
        instant = instant.replace(tzinfo=UTC)
    return instant.astimezone(ZoneInfo(timezone_name)).date()


def _event_summary(event: CosmicEvent) -> dict:
    return {
        "name": event.name,
        "type": event.type,
        "priority": event.priority,
        "energy": event.energy,
        "eventKey": event.event_key,
    }


def _result(event: CosmicEvent, **fields) -> EventDispatchResult:
    return EventDispatchResult(
        event_key=event.event_key,
        event_name=event.name,
        event_type=event.type,
        priority=event.priority,
        **fields,
    )


async def run_notification_check(
    *,
    sent_by: str,
    tracker: NotificationTracker,
    push_client: PushClient,
    now: datetime | None = None,
    settings: NotificationSettings | None = None,
    limit: int | None = None,
) -> DispatchSummary:
    """Compute today's events and push the new, worthy ones.

    Each event is claimed in the ledger before it is sent, so a concurrent
    run that loses the insert skips it. When the ledger is unavailable the
    send goes ahead anyway. A failing send is recorded and the loop moves
    on; only a failure to compute the events aborts the run.
    """
    settings = settings or load_notification_settings()
    now = now or datetime.now(UTC)
    today = local_date(now, settings.timezone)
    limit = limit or settings.limits.for_sender(sent_by)

    await tracker.cleanup_old_dates(settings.retention_days, today=today)

    computed = compute_cosmic_events(now, settings.priorities, today.month)
    ranked = computed.ranked.all

    sent = await tracker.get_sent_events(today)
    if not sent.available:
        logger.warning("Notification ledger unavailable (%s); sending without dedup", sent.reason)

    worthy = [e for e in ranked if is_notification_worthy(e, settings.worthiness)]
    new_events = [e for e in worthy if e.event_key not in sent]
    to_send = select_for_dispatch(ranked, limit, settings.worthiness, exclude_keys=sent.keys)
    moon = computed.snapshot.positions.get("Moon")
    moon_sign = moon.sign if moon else None

    results: list[EventDispatchResult] = []
    for event in to_send:
        outcome = await tracker.mark_event_as_sent(
            today, event.event_key, event.type, event.name, event.priority, sent_by
        )
        if outcome is ClaimOutcome.ALREADY_SENT:
            logger.info("Event %s already sent today, skipping duplicate", event.event_key)
            results.append(_result(event, success=True, duplicate=True))
            continue

        try:
            delivery = await push_client.send(build_payload(event, today, moon_sign))
        except Exception as exc:
            logger.exception("Failed to send notification for %s", event.event_key)
            results.append(_result(event, success=False, error=str(exc)))
            continue

        results.append(
            _result(
                event,
                success=delivery.success,
                recipient_count=delivery.recipient_count,
                successful=delivery.successful,
                failed=delivery.failed,
            )
        )

    summary = DispatchSummary(
        sent_by=sent_by,
        notifications_sent=sum(1 for r in results if r.success and not r.duplicate),
        primary_event=_event_summary(computed.ranked.primary),
        new_events_count=len(new_events),
        total_events_today=len(worthy),
        already_sent_today=len(sent),
        tracker_available=sent.available,
        results=results,
        check_time=now,
    )
    logger.info(
        "Notification check (%s): %d sent, %d new, %d already sent today",
        sent_by,
        summary.notifications_sent,
        summary.new_events_count,
        summary.already_sent_today,
    )
    return summary
