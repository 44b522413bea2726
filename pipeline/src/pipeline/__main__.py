"""Notification scheduler entry point: python -m pipeline."""

from __future__ import annotations

import asyncio
import logging
import sys
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from lunary.config import get_settings
from lunary.database import close_engine, get_session_factory

from pipeline.notifications.dispatch import run_notification_check
from pipeline.notifications.push_client import PushClient
from pipeline.notifications.tracker import NotificationTracker

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
    stream=sys.stdout,
)

logger = logging.getLogger("pipeline")

SWEEP = "4-hourly"
DAILY = "daily"
MODES = {"sweep": SWEEP, "daily": DAILY}


def _parse_daily_schedule(schedule: str) -> tuple[int, int]:
    """Parse a simple daily cron expression: M H * * *."""
    parts = schedule.split()
    if len(parts) != 5:
        raise ValueError(f"Unsupported schedule '{schedule}'. Expected 'M H * * *'.")
    minute_str, hour_str, dom, month, dow = parts
    if dom != "*" or month != "*" or dow != "*":
        raise ValueError(f"Unsupported schedule '{schedule}'. Only daily schedules are supported.")

    minute = int(minute_str)
    hour = int(hour_str)
    if minute < 0 or minute > 59 or hour < 0 or hour > 23:
        raise ValueError(f"Invalid schedule '{schedule}'.")
    return hour, minute


def _next_run(now: datetime, hour: int, minute: int) -> datetime:
    target = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
    if target <= now:
        target += timedelta(days=1)
    return target


def _next_sweep(now: datetime, interval_hours: int) -> datetime:
    """Next slot on the interval grid anchored at local midnight (0h, 4h, 8h...)."""
    if interval_hours < 1 or interval_hours > 24:
        raise ValueError(f"Invalid sweep interval {interval_hours}h.")
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    target = midnight
    while target <= now:
        target += timedelta(hours=interval_hours)
    return target


async def _run_once(sent_by: str, *, fail_hard: bool) -> None:
    tracker = NotificationTracker(get_session_factory())
    push_client = PushClient.from_settings()
    try:
        summary = await run_notification_check(
            sent_by=sent_by,
            tracker=tracker,
            push_client=push_client,
        )
        logger.info(
            "Notification check (%s) completed: %d sent",
            sent_by,
            summary.notifications_sent,
        )
    except Exception as exc:
        logger.error("Notification check (%s) failed: %s", sent_by, exc)
        if fail_hard:
            raise
    finally:
        await push_client.close()


async def _sleep_until(target: datetime, now: datetime) -> bool:
    """Sleep in 30 second slices; True once ``target`` has been reached."""
    sleep_seconds = max((target - now).total_seconds(), 1.0)
    if sleep_seconds > 30:
        await asyncio.sleep(30)
        return False
    await asyncio.sleep(sleep_seconds)
    return True


async def _run_sweep_scheduler() -> None:
    last_announced: str | None = None
    while True:
        settings = get_settings()
        try:
            tz = ZoneInfo(settings.timezone)
            now = datetime.now(tz)
            target = _next_sweep(now, settings.notify_sweep_interval_hours)
        except Exception as exc:
            logger.error(
                "Invalid sweep configuration interval=%s timezone='%s': %s",
                settings.notify_sweep_interval_hours,
                settings.timezone,
                exc,
            )
            await asyncio.sleep(30)
            continue

        if target.isoformat() != last_announced:
            logger.info("Next notification sweep scheduled for %s", target.isoformat())
            last_announced = target.isoformat()

        if await _sleep_until(target, now):
            await _run_once(SWEEP, fail_hard=False)


async def _run_daily_scheduler() -> None:
    last_announced: str | None = None
    while True:
        settings = get_settings()
        try:
            hour, minute = _parse_daily_schedule(settings.notify_daily_schedule)
            tz = ZoneInfo(settings.timezone)
        except Exception as exc:
            logger.error(
                "Invalid daily schedule='%s' timezone='%s': %s",
                settings.notify_daily_schedule,
                settings.timezone,
                exc,
            )
            await asyncio.sleep(30)
            continue

        now = datetime.now(tz)
        target = _next_run(now, hour, minute)
        if target.isoformat() != last_announced:
            logger.info(
                "Next daily notification digest scheduled for %s using '%s' %s",
                target.isoformat(),
                settings.notify_daily_schedule,
                settings.timezone,
            )
            last_announced = target.isoformat()

        if await _sleep_until(target, now):
            await _run_once(DAILY, fail_hard=False)


async def main() -> None:
    """Run one pass (--once sweep|daily) or both schedulers."""
    logger.info("Starting Lunary notification scheduler")
    args = sys.argv[1:]
    try:
        if "--once" in args:
            index = args.index("--once")
            mode = args[index + 1] if index + 1 < len(args) else "sweep"
            if mode not in MODES:
                logger.error("Unknown mode '%s'; expected one of %s", mode, sorted(MODES))
                sys.exit(2)
            try:
                await _run_once(MODES[mode], fail_hard=True)
            except Exception:
                sys.exit(1)
            return

        await asyncio.gather(
            _run_sweep_scheduler(),
            _run_daily_scheduler(),
        )
    except Exception as exc:
        logger.error("Notification scheduler failed: %s", exc)
        sys.exit(1)
    finally:
        await close_engine()


if __name__ == "__main__":
    asyncio.run(main())
