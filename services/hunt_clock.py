"""
Time gates of an event, evaluated from stored timestamps on every call
"""
from datetime import datetime, timedelta
from typing import Optional

from models.event import Event


def event_is_active(event: Event) -> bool:
    return bool(event.is_active)


def hunt_ends_at(event: Event) -> Optional[datetime]:
    if event.hunt_started_at is None:
        return None
    return event.hunt_started_at + timedelta(minutes=event.hunt_duration_minutes)


def hunt_is_running(event: Event, now: datetime) -> bool:
    ends_at = hunt_ends_at(event)
    return ends_at is not None and now < ends_at


def hunt_has_expired(event: Event, now: datetime) -> bool:
    ends_at = hunt_ends_at(event)
    return ends_at is not None and now >= ends_at


def within_registration_window(event: Event, now: datetime) -> bool:
    """A missing bound leaves that side of the window open"""
    if event.registration_start is not None and now < event.registration_start:
        return False
    if event.registration_end is not None and now > event.registration_end:
        return False
    return True


def hunt_time_remaining(event: Event, now: datetime) -> timedelta:
    """Display only, never used to authorize an action"""
    ends_at = hunt_ends_at(event)
    if ends_at is None or now >= ends_at:
        return timedelta(0)
    return ends_at - now
