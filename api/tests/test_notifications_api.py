"""Tests for the notification preview endpoint."""

import pytest
from ephemeris.lunar import moon_phase_from_age
from httpx import AsyncClient
from lunary.schemas.ephemeris import BodyPosition, CelestialSnapshot
from lunary.schemas.events import AspectEvent, IngressEvent, MoonEvent
from pipeline.notifications.aggregator import rank_events
from pipeline.notifications.tracker import SentEvents
from pipeline.stages.cosmic_events_stage import CosmicEventsResult

import api.routers.notifications as notifications_router


def _result():
    events = [
        MoonEvent(
            name="Pink Moon",
            canonical_name="Full Moon",
            energy="Peak Power",
            priority=10,
            age_days=14.9,
            illumination_percent=99.7,
        ),
        IngressEvent(name="Mars enters Leo", priority=8, planet="Mars", sign="Leo", degree_in_sign=0.4),
        AspectEvent(
            name="Venus-Mars sextile",
            priority=5,
            planet_a="Venus",
            planet_b="Mars",
            aspect_type="sextile",
            separation_degrees=60.2,
            orb=0.2,
            sign_a="Gemini",
            sign_b="Leo",
        ),
    ]
    snapshot = CelestialSnapshot(
        timestamp="2025-04-13T12:00:00Z",
        positions={"Moon": BodyPosition(longitude=200.0, sign="Libra", degree_in_sign=20.0)},
        moon_illumination=0.997,
        moon_phase_angle=181.0,
    )
    return CosmicEventsResult(
        snapshot=snapshot,
        moon_phase=moon_phase_from_age(14.9, 4),
        ranked=rank_events(events),
    )


@pytest.fixture
def fixed_events(monkeypatch):
    calls = []

    def fake_compute(instant, priorities, month):
        calls.append(instant)
        return _result()

    monkeypatch.setattr(notifications_router, "compute_cosmic_events", fake_compute)
    return calls


@pytest.mark.asyncio
async def test_preview_requires_secret(unauthenticated_client: AsyncClient, fixed_events):
    response = await unauthenticated_client.get("/notifications/preview")
    assert response.status_code == 401
    assert fixed_events == []


@pytest.mark.asyncio
async def test_preview_lists_worthy_events(client: AsyncClient, fixed_events, mock_tracker):
    mock_tracker.get_sent_events.return_value = SentEvents.ok({"moon-Pink Moon-10"})

    response = await client.get("/notifications/preview", params={"date": "2025-04-13"})

    assert response.status_code == 200
    body = response.json()
    assert body["date"] == "2025-04-13"
    assert fixed_events[0].isoformat() == "2025-04-13T12:00:00+00:00"

    previews = body["notifications"]
    assert [p["eventName"] for p in previews] == ["Pink Moon", "Mars enters Leo"]
    assert previews[0]["wouldSend"] is False
    assert previews[0]["body"].startswith("Moon in Libra:")
    assert previews[1]["wouldSend"] is True
    assert previews[1]["title"] == "Mars Enters Leo"

    assert [e["name"] for e in body["allEvents"]] == [
        "Pink Moon",
        "Mars enters Leo",
        "Venus-Mars sextile",
    ]
    assert body["allEvents"][2]["worthy"] is False
    assert body["alreadySent"] == ["moon-Pink Moon-10"]
    assert body["trackerAvailable"] is True


@pytest.mark.asyncio
async def test_preview_with_unavailable_tracker(client: AsyncClient, fixed_events, mock_tracker):
    mock_tracker.get_sent_events.return_value = SentEvents.unavailable("db down")

    response = await client.get("/notifications/preview", params={"date": "2025-04-13"})

    body = response.json()
    assert body["trackerAvailable"] is False
    assert all(p["wouldSend"] for p in body["notifications"])


@pytest.mark.asyncio
async def test_preview_rejects_bad_date(client: AsyncClient, fixed_events):
    response = await client.get("/notifications/preview", params={"date": "13/04/2025"})
    assert response.status_code == 422
