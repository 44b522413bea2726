"""Ledger of notifications already pushed, keyed by (date, event key).

The unique constraint on ``(date, event_key)`` is the only coordination
between the 4-hourly sweep and the daily digest. Every operation fails open:
a broken ledger must never stop notifications from going out.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta

from lunary.models import Base, NotificationSentEvent
from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

logger = logging.getLogger(__name__)

SENT_BY_VALUES = ("daily", "4-hourly")

_MISSING_TABLE_MARKERS = ("does not exist", "no such table", "undefinedtable")


class ClaimOutcome(enum.StrEnum):
    CLAIMED = "claimed"
    ALREADY_SENT = "already_sent"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class SentEvents:
    """Keys already sent on a date, or an explicit "ledger unavailable"."""

    keys: frozenset[str]
    available: bool
    reason: str | None = None

    @classmethod
    def ok(cls, keys: frozenset[str] | set[str]) -> SentEvents:
        return cls(keys=frozenset(keys), available=True)

    @classmethod
    def unavailable(cls, reason: str) -> SentEvents:
        return cls(keys=frozenset(), available=False, reason=reason)

    def __contains__(self, key: object) -> bool:
        return key in self.keys

    def __len__(self) -> int:
        return len(self.keys)


def _is_missing_table(exc: BaseException) -> bool:
    message = f"{type(exc).__name__} {exc}".lower()
    return any(marker in message for marker in _MISSING_TABLE_MARKERS)


class SchemaGuard:
    """Once-per-process check that the ledger table exists.

    ``ensure`` is safe to call from concurrent tasks; ``reset`` returns the
    guard to its initial state (process shutdown, tests).
    """

    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self.checked = False

    async def ensure(self, session_factory: async_sessionmaker[AsyncSession]) -> bool:
        if self.checked:
            return True
        async with self._lock:
            if self.checked:
                return True

            try:
                async with session_factory() as session:
                    await session.execute(select(NotificationSentEvent.id).limit(1))
                self.checked = True
                return True
            except Exception as exc:
                if not _is_missing_table(exc):
                    logger.warning("Notification ledger unreachable: %s", exc)
                    return False

            try:
                async with session_factory() as session:
                    connection = await session.connection()
                    await connection.run_sync(
                        lambda sync_conn: Base.metadata.create_all(
                            sync_conn, tables=[NotificationSentEvent.__table__]
                        )
                    )
                    await session.commit()
            except Exception as exc:
                logger.warning("Could not create notification ledger table: %s", exc)
                return False

            logger.info("Created notification_sent_events table")
            self.checked = True
            return True

    def reset(self) -> None:
        self.checked = False


class NotificationTracker:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        guard: SchemaGuard | None = None,
    ) -> None:
        self._session_factory = session_factory
        self.guard = guard or SchemaGuard()

    async def initialize(self) -> bool:
        """Verify or create the ledger table up front."""
        return await self.guard.ensure(self._session_factory)

    def reset(self) -> None:
        self.guard.reset()

    async def get_sent_events(self, day: date) -> SentEvents:
        if not await self.guard.ensure(self._session_factory):
            return SentEvents.unavailable("schema check failed")
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(NotificationSentEvent.event_key).where(
                        NotificationSentEvent.date == day
                    )
                )
                keys = frozenset(result.scalars().all())
        except Exception as exc:
            logger.warning("Failed to read sent events for %s: %s", day, exc)
            return SentEvents.unavailable(str(exc))
        return SentEvents.ok(keys)

    async def mark_event_as_sent(
        self,
        day: date,
        event_key: str,
        event_type: str,
        event_name: str,
        event_priority: int,
        sent_by: str,
    ) -> ClaimOutcome:
        """Insert the ledger row unless it exists; report whether we inserted it."""
        if sent_by not in SENT_BY_VALUES:
            raise ValueError(f"sent_by must be one of {SENT_BY_VALUES}, got {sent_by!r}")
        if not await self.guard.ensure(self._session_factory):
            return ClaimOutcome.UNAVAILABLE
        values = {
            "date": day,
            "event_key": event_key,
            "event_type": event_type,
            "event_name": event_name,
            "event_priority": event_priority,
            "sent_by": sent_by,
        }
        try:
            async with self._session_factory() as session:
                insert = sqlite_insert if session.get_bind().dialect.name == "sqlite" else pg_insert
                stmt = (
                    insert(NotificationSentEvent)
                    .values(**values)
                    .on_conflict_do_nothing(index_elements=["date", "event_key"])
                    .returning(NotificationSentEvent.id)
                )
                inserted_id = (await session.execute(stmt)).scalar_one_or_none()
                await session.commit()
        except Exception as exc:
            logger.warning("Failed to mark %s as sent for %s: %s", event_key, day, exc)
            return ClaimOutcome.UNAVAILABLE

        if inserted_id is None:
            return ClaimOutcome.ALREADY_SENT
        return ClaimOutcome.CLAIMED

    async def cleanup_old_dates(
        self,
        keep_days: int = 1,
        *,
        today: date | None = None,
    ) -> int | None:
        """Delete rows older than ``today - keep_days``; None if the ledger failed."""
        if not await self.guard.ensure(self._session_factory):
            return None
        today = today or datetime.now(UTC).date()
        cutoff = today - timedelta(days=max(0, keep_days))
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    delete(NotificationSentEvent).where(NotificationSentEvent.date < cutoff)
                )
                await session.commit()
        except Exception as exc:
            logger.warning("Failed to clean up notification ledger before %s: %s", cutoff, exc)
            return None
        deleted = int(result.rowcount or 0)
        if deleted:
            logger.info("Removed %d notification ledger rows before %s", deleted, cutoff)
        return deleted
