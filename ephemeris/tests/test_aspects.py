"""Tests for aspect detection."""

from ephemeris.aspects import angular_distance, classify_separation, find_aspects
from ephemeris.bodies import ASPECT_WINDOWS


def test_angular_distance():
    """Test angular distance calculation."""
    assert angular_distance(0, 90) == 90.0
    assert angular_distance(90, 0) == 90.0
    assert angular_distance(0, 180) == 180.0
    assert angular_distance(350, 10) == 20.0
    assert angular_distance(10, 350) == 20.0
    assert abs(angular_distance(0, 0) - 0.0) < 0.001


def test_angular_distance_wraparound():
    """Test angular distance handles wraparound correctly."""
    assert abs(angular_distance(355, 5) - 10.0) < 0.001
    assert abs(angular_distance(1, 359) - 2.0) < 0.001


def test_aspect_windows_are_exclusive():
    """No separation in [0, 180] falls inside two aspect windows."""
    for step in range(0, 18001):
        separation = step / 100.0
        matches = [
            name
            for name, (angle, orb) in ASPECT_WINDOWS.items()
            if abs(separation - angle) < orb
        ]
        assert len(matches) <= 1, (separation, matches)


def test_classify_separation_edges():
    assert classify_separation(7.99)[0] == "conjunction"
    assert classify_separation(8.0) is None
    assert classify_separation(54.5)[0] == "sextile"
    assert classify_separation(66.0) is None
    assert classify_separation(172.5)[0] == "opposition"
    assert classify_separation(45.0) is None


def test_jupiter_saturn_is_great_conjunction(make_snapshot):
    snapshot = make_snapshot(Jupiter=100.0, Saturn=104.0)
    aspects = find_aspects(snapshot)

    assert len(aspects) == 1
    aspect = aspects[0]
    assert aspect.aspect_type == "conjunction"
    assert aspect.priority == 9
    assert aspect.name == "Jupiter-Saturn conjunction"
    assert aspect.separation_degrees == 4.0
    assert aspect.orb == 4.0
    assert aspect.event_key == "aspect-Jupiter-Saturn conjunction-9"


def test_other_conjunctions_keep_base_priority(make_snapshot):
    aspects = find_aspects(make_snapshot(Mars=10.0, Venus=12.0))
    assert aspects[0].priority == 7
    assert aspects[0].name == "Venus-Mars conjunction"


def test_moon_is_not_aspected(make_snapshot):
    assert find_aspects(make_snapshot(Moon=100.0, Mars=100.5)) == []


def test_aspects_sorted_by_priority(make_snapshot):
    snapshot = make_snapshot(Sun=0.0, Mercury=62.0, Mars=182.0, Jupiter=300.0, Saturn=303.0)
    aspects = find_aspects(snapshot)
    priorities = [a.priority for a in aspects]
    assert priorities == sorted(priorities, reverse=True)
    assert aspects[0].name == "Jupiter-Saturn conjunction"
