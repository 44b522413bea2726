"""Scheduler-triggered notification checks."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pipeline.notifications.dispatch import run_notification_check
from pipeline.notifications.push_client import PushClient
from pipeline.notifications.tracker import NotificationTracker

from api.dependencies import get_push_client, get_tracker, require_cron_secret

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(require_cron_secret)])


async def _run_check(
    sent_by: str,
    tracker: NotificationTracker,
    push_client: PushClient,
):
    check_time = datetime.now(UTC)
    try:
        summary = await run_notification_check(
            sent_by=sent_by,
            tracker=tracker,
            push_client=push_client,
            now=check_time,
        )
    except Exception as exc:
        logger.exception("Notification check (%s) failed", sent_by)
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": str(exc) or type(exc).__name__,
                "checkTime": check_time.isoformat(),
            },
        )
    return summary.to_response()


@router.get("/check-notifications")
async def check_notifications(
    tracker: NotificationTracker = Depends(get_tracker),
    push_client: PushClient = Depends(get_push_client),
):
    return await _run_check("4-hourly", tracker, push_client)


@router.get("/daily-notifications")
async def daily_notifications(
    tracker: NotificationTracker = Depends(get_tracker),
    push_client: PushClient = Depends(get_push_client),
):
    return await _run_check("daily", tracker, push_client)
