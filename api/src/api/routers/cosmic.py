"""Public cosmic snapshot endpoint."""

from __future__ import annotations

import logging
from datetime import UTC, date, datetime

from ephemeris.calculator import EphemerisError
from fastapi import APIRouter, HTTPException, Query

from api.services.cosmic_snapshot import get_cosmic_snapshot

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/cosmic-snapshot")
async def cosmic_snapshot(day: date | None = Query(default=None, alias="date")):
    day = day or datetime.now(UTC).date()
    try:
        return get_cosmic_snapshot(day)
    except EphemerisError as exc:
        logger.error("Cosmic snapshot for %s failed: %s", day, exc)
        raise HTTPException(status_code=503, detail="Ephemeris unavailable") from exc
