"""Interactive preview of what the scheduler would push for a date."""

from __future__ import annotations

from datetime import UTC, date, datetime

from fastapi import APIRouter, Depends, Query
from lunary.schemas.notifications import NotificationPreview
from lunary.services.notification_settings import load_notification_settings
from pipeline.notifications.aggregator import select_for_dispatch
from pipeline.notifications.dispatch import local_date
from pipeline.notifications.templates import classify
from pipeline.notifications.tracker import NotificationTracker
from pipeline.notifications.worthiness import is_notification_worthy
from pipeline.stages.cosmic_events_stage import compute_cosmic_events

from api.dependencies import get_tracker, require_cron_secret
from api.services.cosmic_snapshot import snapshot_instant

router = APIRouter(dependencies=[Depends(require_cron_secret)])


@router.get("/preview")
async def preview_notifications(
    day: date | None = Query(default=None, alias="date"),
    tracker: NotificationTracker = Depends(get_tracker),
):
    settings = load_notification_settings()
    if day is None:
        now = datetime.now(UTC)
        day = local_date(now, settings.timezone)
    else:
        now = snapshot_instant(day)

    computed = compute_cosmic_events(now, settings.priorities, day.month)
    ranked = computed.ranked.all
    sent = await tracker.get_sent_events(day)
    moon = computed.snapshot.positions.get("Moon")
    moon_sign = moon.sign if moon else None

    # Already-sent events stay in the preview with wouldSend false.
    top = select_for_dispatch(ranked, settings.limits.preview, settings.worthiness)
    previews = []
    for event in top:
        copy = classify(event, moon_sign)
        previews.append(
            NotificationPreview(
                title=copy.title,
                body=copy.body,
                type=event.type,
                priority=event.priority,
                event_name=event.name,
                event_key=event.event_key,
                would_send=event.event_key not in sent,
            ).to_response()
        )

    return {
        "date": day.isoformat(),
        "primaryEvent": computed.ranked.primary.model_dump(mode="json"),
        "notifications": previews,
        "allEvents": [
            {
                "name": e.name,
                "type": e.type,
                "priority": e.priority,
                "eventKey": e.event_key,
                "worthy": is_notification_worthy(e, settings.worthiness),
            }
            for e in ranked
        ],
        "alreadySent": sorted(sent.keys),
        "trackerAvailable": sent.available,
    }
