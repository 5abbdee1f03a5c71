"""
Tests for the hunt clock gates
"""
from datetime import datetime, timedelta

from models.event import Event
from services import hunt_clock

NOW = datetime(2026, 5, 1, 12, 0, 0)


def event(**fields):
    defaults = {"name": "Clock", "is_active": True, "hunt_duration_minutes": 60}
    defaults.update(fields)
    return Event(**defaults)


class TestHuntClock:
    def test_not_started(self):
        e = event(hunt_started_at=None)
        assert hunt_clock.hunt_is_running(e, NOW) is False
        assert hunt_clock.hunt_has_expired(e, NOW) is False
        assert hunt_clock.hunt_time_remaining(e, NOW) == timedelta(0)

    def test_running(self):
        e = event(hunt_started_at=NOW - timedelta(minutes=20))
        assert hunt_clock.hunt_is_running(e, NOW) is True
        assert hunt_clock.hunt_time_remaining(e, NOW) == timedelta(minutes=40)

    def test_expires_exactly_at_duration(self):
        e = event(hunt_started_at=NOW - timedelta(minutes=60))
        assert hunt_clock.hunt_is_running(e, NOW) is False
        assert hunt_clock.hunt_has_expired(e, NOW) is True
        assert hunt_clock.hunt_time_remaining(e, NOW) == timedelta(0)

    def test_event_is_active(self):
        assert hunt_clock.event_is_active(event(is_active=True)) is True
        assert hunt_clock.event_is_active(event(is_active=False)) is False

    def test_registration_window(self):
        e = event(registration_start=NOW - timedelta(hours=1), registration_end=NOW + timedelta(hours=1))
        assert hunt_clock.within_registration_window(e, NOW) is True
        assert hunt_clock.within_registration_window(e, NOW + timedelta(hours=2)) is False
        assert hunt_clock.within_registration_window(e, NOW - timedelta(hours=2)) is False

    def test_open_registration_bounds(self):
        assert hunt_clock.within_registration_window(event(), NOW) is True
        e = event(registration_end=NOW - timedelta(minutes=1))
        assert hunt_clock.within_registration_window(e, NOW) is False
