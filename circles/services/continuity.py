"""Capacity and continuity calculations for circle events.

All functions are pure: the current instant is always passed in.
"""
from datetime import datetime, time, timedelta
from typing import Optional

import pytz

from circles.models.event import ContinuityStatus, Event, SessionFrequency, SessionMode
from circles.models.taxonomy import Locale

DEFAULT_SESSION_TIME = time(12, 0)

_CONTINUITY_TEXT = {
    Locale.EN: {
        ContinuityStatus.NOT_STARTED: "Starting Soon",
        ContinuityStatus.IN_PROGRESS_WITH_ROOM: "Ongoing",
        ContinuityStatus.IN_PROGRESS_FULL: "Full",
    },
    Locale.FR: {
        ContinuityStatus.NOT_STARTED: "Bientôt",
        ContinuityStatus.IN_PROGRESS_WITH_ROOM: "En cours",
        ContinuityStatus.IN_PROGRESS_FULL: "Complet",
    },
}

_WEEK_WORDS = {
    Locale.EN: ("week", "weeks"),
    Locale.FR: ("semaine", "semaines"),
}

_FREQUENCY_LABELS = {
    SessionFrequency.WEEKLY: {Locale.EN: "Weekly", Locale.FR: "Hebdomadaire"},
    SessionFrequency.MONTHLY: {Locale.EN: "Monthly", Locale.FR: "Mensuel"},
    SessionFrequency.ONE_TIME: {Locale.EN: "One-Time Session", Locale.FR: "Session unique"},
}

_MODE_LABELS = {
    SessionMode.IN_PERSON: {Locale.EN: "In-Person Session", Locale.FR: "Session en personne"},
    SessionMode.REMOTE: {Locale.EN: "Remote Session", Locale.FR: "Session à distance"},
}


def remaining_capacity(event: Event) -> Optional[int]:
    """Open spots, or None when capacity is unlimited. Never negative."""
    if event.capacity is None:
        return None
    return max(0, event.capacity - (event.attendees_count or 0))


def _parse_time(value: Optional[str]) -> time:
    if not value:
        return DEFAULT_SESSION_TIME
    try:
        hours, minutes = value.strip().split(":")[:2]
        return time(int(hours), int(minutes))
    except ValueError:
        return DEFAULT_SESSION_TIME


def effective_start(event: Event, tz: Optional[pytz.BaseTzInfo] = None) -> Optional[datetime]:
    """Start instant of the first session.

    Uses startDate when present, otherwise combines the date and time
    fields. The combination is localized in `tz` when given and left naive
    otherwise.
    """
    if event.start_date is not None:
        return event.start_date
    if not event.date:
        return None

    try:
        day = datetime.strptime(event.date.strip(), "%Y-%m-%d").date()
    except ValueError:
        return None

    start = datetime.combine(day, _parse_time(event.time))
    if tz is not None:
        return tz.localize(start)
    return start


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return pytz.UTC.localize(value)
    return value


def continuity_status(
    event: Event, now: datetime, tz: Optional[pytz.BaseTzInfo] = None
) -> ContinuityStatus:
    """Classify an event as not started, in progress with room, or full.

    A start equal to `now` counts as started.
    """
    start = effective_start(event, tz)
    if start is None:
        return ContinuityStatus.UNKNOWN

    if (start.tzinfo is None) != (now.tzinfo is None):
        start, now = _as_utc(start), _as_utc(now)

    if start > now:
        return ContinuityStatus.NOT_STARTED

    spots = remaining_capacity(event)
    if spots is None or spots > 0:
        return ContinuityStatus.IN_PROGRESS_WITH_ROOM
    return ContinuityStatus.IN_PROGRESS_FULL


def weeks_since_start(event: Event, now: datetime, tz: Optional[pytz.BaseTzInfo] = None) -> int:
    start = effective_start(event, tz)
    if start is None:
        return 0
    if (start.tzinfo is None) != (now.tzinfo is None):
        start, now = _as_utc(start), _as_utc(now)
    return max(0, (now - start) // timedelta(weeks=1))


def continuity_text(
    event: Event,
    now: datetime,
    locale: Locale | str = Locale.EN,
    tz: Optional[pytz.BaseTzInfo] = None,
) -> Optional[str]:
    """Display string for the continuity badge, None when unknown."""
    locale = Locale(locale)
    status = continuity_status(event, now, tz)
    if status is ContinuityStatus.UNKNOWN:
        return None

    text = _CONTINUITY_TEXT[locale][status]
    if status is ContinuityStatus.IN_PROGRESS_WITH_ROOM:
        weeks = weeks_since_start(event, now, tz)
        if weeks > 0:
            singular, plural = _WEEK_WORDS[locale]
            text = f"{text} ({weeks} {singular if weeks == 1 else plural})"
    return text


def frequency_label(frequency: Optional[SessionFrequency], locale: Locale | str = Locale.EN) -> str:
    if frequency is None:
        return ""
    return _FREQUENCY_LABELS[SessionFrequency(frequency)][Locale(locale)]


def session_mode_label(mode: Optional[SessionMode], locale: Locale | str = Locale.EN) -> str:
    if mode is None:
        return ""
    return _MODE_LABELS[SessionMode(mode)][Locale(locale)]
