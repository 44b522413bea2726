"""Tests for the ephemeris adapter."""

from datetime import UTC, datetime

import pytest
from ephemeris import calculator
from ephemeris.bodies import SIGNS, TRACKED_BODIES, longitude_to_sign, sign_for_longitude
from ephemeris.calculator import EphemerisError, calculate_snapshot, is_retrograde, position


def test_longitude_to_sign():
    """Test longitude to sign conversion."""
    assert longitude_to_sign(0.0) == ("Aries", 0.0)
    assert longitude_to_sign(30.0) == ("Taurus", 0.0)
    assert longitude_to_sign(90.0) == ("Cancer", 0.0)
    assert longitude_to_sign(180.0) == ("Libra", 0.0)
    assert longitude_to_sign(270.0) == ("Capricorn", 0.0)

    sign, degree = longitude_to_sign(45.5)
    assert sign == "Taurus"
    assert abs(degree - 15.5) < 0.001

    # Wraparound
    sign, _ = longitude_to_sign(359.0)
    assert sign == "Pisces"


def test_sign_is_periodic():
    """sign(L) == sign(L + 360k) for negative and large multiples."""
    for tenth in range(0, 3600, 7):
        longitude = tenth / 10.0
        expected = sign_for_longitude(longitude)
        for k in (-3, -1, 1, 2, 10):
            assert sign_for_longitude(longitude + 360.0 * k) == expected


def test_sign_handles_tiny_negative_longitude():
    assert sign_for_longitude(-1e-15) == "Aries"
    assert sign_for_longitude(-0.5) == "Pisces"
    assert sign_for_longitude(720.0) == "Aries"


def test_is_retrograde_plain_motion():
    assert is_retrograde(10.0, 11.0) is True
    assert is_retrograde(11.0, 10.0) is False


def test_is_retrograde_across_zero_aries():
    """Moving backward from 0.5 to 359.5 is retrograde; forward across 0 is not."""
    assert is_retrograde(359.5, 0.5) is True
    assert is_retrograde(0.5, 359.5) is False


def _fake_longitudes(monkeypatch, track):
    """Patch the swisseph call with ``track(body, jd) -> longitude``."""
    monkeypatch.setattr(calculator, "_calc_longitude", track)


def test_position_flags_station_retrograde(monkeypatch):
    # Direct until yesterday, backward over the last day
    samples = {}

    def track(body, jd):
        samples.setdefault(body, []).append(jd)
        offsets = {0: 100.0, 1: 100.5, 2: 100.2}
        return offsets[len(samples[body]) - 1]

    _fake_longitudes(monkeypatch, track)
    pos = position("Mercury", datetime(2025, 3, 16, 12, 0, tzinfo=UTC))

    assert pos.retrograde is True
    assert pos.station_retrograde is True
    assert pos.station_direct is False
    assert pos.sign == "Cancer"


def test_position_flags_station_direct(monkeypatch):
    samples = {}

    def track(body, jd):
        samples.setdefault(body, []).append(jd)
        # now, 24h ago, 48h ago
        return (200.6, 200.4, 200.8)[len(samples[body]) - 1]

    _fake_longitudes(monkeypatch, track)
    pos = position("Mars", datetime(2025, 2, 24, 12, 0, tzinfo=UTC))

    assert pos.retrograde is False
    assert pos.station_direct is True
    assert pos.station_retrograde is False


def test_luminaries_never_station(monkeypatch):
    _fake_longitudes(monkeypatch, lambda body, jd: 50.0 - (jd % 1))
    pos = position("Sun", datetime(2025, 1, 1, 12, 0, tzinfo=UTC))
    assert pos.station_retrograde is False
    assert pos.station_direct is False


def test_unknown_body_raises():
    with pytest.raises(EphemerisError):
        calculator._calc_longitude("Chiron", 2460000.5)


def test_calculate_snapshot_returns_valid_output():
    """Real swisseph snapshot covers every tracked body with sane values."""
    snapshot = calculate_snapshot(datetime(2024, 3, 20, 12, 0, tzinfo=UTC))

    assert set(snapshot.positions) == set(TRACKED_BODIES)
    for body, pos in snapshot.positions.items():
        assert 0.0 <= pos.longitude < 360.0, body
        assert pos.sign in SIGNS
        assert pos.sign == sign_for_longitude(pos.longitude)
    assert 0.0 <= snapshot.moon_illumination <= 1.0
    assert 0.0 <= snapshot.moon_phase_angle < 360.0


def test_calculate_snapshot_at_march_equinox():
    """The Sun sits just past 0 Aries at noon on 2024-03-20."""
    snapshot = calculate_snapshot(datetime(2024, 3, 20, 12, 0, tzinfo=UTC))
    sun = snapshot.positions["Sun"]
    assert sun.sign == "Aries"
    assert sun.longitude < 1.0
    assert snapshot.positions["Sun"].retrograde is False


def test_naive_datetime_treated_as_utc():
    naive = calculate_snapshot(datetime(2024, 6, 1, 0, 0))
    aware = calculate_snapshot(datetime(2024, 6, 1, 0, 0, tzinfo=UTC))
    assert naive.positions["Moon"].longitude == pytest.approx(aware.positions["Moon"].longitude)
