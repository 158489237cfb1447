"""Unit tests for capacity and continuity calculations."""
from datetime import datetime, timedelta, timezone

import pytest
import pytz

from circles.models import ContinuityStatus, Event, SessionFrequency, SessionMode
from circles.services.continuity import (
    continuity_status,
    continuity_text,
    effective_start,
    frequency_label,
    remaining_capacity,
    session_mode_label,
    weeks_since_start,
)

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
TORONTO = pytz.timezone("America/Toronto")


def started(delta: timedelta, **kwargs) -> Event:
    """Event whose first session was `delta` before NOW."""
    return Event(startDate=NOW - delta, **kwargs)


class TestRemainingCapacity:
    """Test remaining capacity."""

    @pytest.mark.parametrize(
        "capacity,attendees,expected",
        [(10, 3, 7), (10, 10, 0), (5, 8, 0), (5, None, 5), (None, 4, None), (-2, None, 0)],
    )
    def test_remaining_capacity(self, capacity, attendees, expected):
        """Test remaining spots are floored at zero and None means unlimited."""
        event = Event(capacity=capacity, attendeesCount=attendees)
        assert remaining_capacity(event) == expected


class TestContinuityStatus:
    """Test continuity classification."""

    def test_future_start_not_started(self):
        """Test a start after now is not started."""
        event = Event(startDate=NOW + timedelta(seconds=1), capacity=5, attendeesCount=5)
        assert continuity_status(event, NOW) is ContinuityStatus.NOT_STARTED

    def test_start_equal_to_now_is_started(self):
        """Test the boundary instant counts as started."""
        assert continuity_status(Event(startDate=NOW), NOW) is ContinuityStatus.IN_PROGRESS_WITH_ROOM

    def test_started_and_full(self):
        """Test a started event without spots is full."""
        event = started(timedelta(days=3), capacity=10, attendeesCount=10)
        assert continuity_status(event, NOW) is ContinuityStatus.IN_PROGRESS_FULL

    def test_started_with_room(self):
        """Test a started event with spots left has room."""
        event = started(timedelta(days=3), capacity=10, attendeesCount=9)
        assert continuity_status(event, NOW) is ContinuityStatus.IN_PROGRESS_WITH_ROOM

    def test_unlimited_capacity_has_room(self):
        """Test events without a capacity never fill up."""
        event = started(timedelta(days=3), attendeesCount=500)
        assert continuity_status(event, NOW) is ContinuityStatus.IN_PROGRESS_WITH_ROOM

    @pytest.mark.parametrize("document", [{}, {"date": "not-a-date"}, {"time": "18:00"}])
    def test_unknown_without_start(self, document):
        """Test events without a usable start are unknown."""
        assert continuity_status(Event.model_validate(document), NOW) is ContinuityStatus.UNKNOWN

    def test_date_and_time_in_event_zone(self):
        """Test date and time fields are read in the event time zone."""
        # 08:00 EDT is 12:00 UTC
        at_now = Event(date="2026-10-19", time="08:00")
        later = Event(date="2026-10-19", time="09:00")

        assert continuity_status(at_now, NOW, TORONTO) is ContinuityStatus.IN_PROGRESS_WITH_ROOM
        assert continuity_status(later, NOW, TORONTO) is ContinuityStatus.NOT_STARTED

    def test_missing_time_defaults_to_noon(self):
        """Test a date without time starts at noon."""
        event = Event(date="2026-10-19")
        assert effective_start(event) == datetime(2026, 10, 19, 12, 0)
        assert continuity_status(event, NOW) is ContinuityStatus.IN_PROGRESS_WITH_ROOM

    def test_malformed_time_defaults_to_noon(self):
        """Test an unreadable time falls back to noon."""
        event = Event(date="2026-10-20", time="evening")
        assert effective_start(event, TORONTO) == TORONTO.localize(datetime(2026, 10, 20, 12, 0))

    def test_start_date_preferred_over_date_fields(self):
        """Test startDate wins when both representations are stored."""
        event = Event(startDate=NOW, date="2030-01-01", time="10:00")
        assert effective_start(event, TORONTO) == NOW


class TestContinuityText:
    """Test continuity badge text."""

    def test_starting_soon(self):
        """Test not started text in both locales."""
        event = Event(startDate=NOW + timedelta(days=2))
        assert continuity_text(event, NOW, "en") == "Starting Soon"
        assert continuity_text(event, NOW, "fr") == "Bientôt"

    def test_ongoing_with_weeks(self):
        """Test whole weeks since start are appended."""
        event = started(timedelta(days=15))
        assert weeks_since_start(event, NOW) == 2
        assert continuity_text(event, NOW, "en") == "Ongoing (2 weeks)"
        assert continuity_text(event, NOW, "fr") == "En cours (2 semaines)"

    def test_ongoing_single_week(self):
        """Test singular week wording."""
        assert continuity_text(started(timedelta(days=8)), NOW) == "Ongoing (1 week)"

    def test_ongoing_first_week(self):
        """Test no week count during the first week."""
        assert continuity_text(started(timedelta(days=1)), NOW) == "Ongoing"

    def test_full(self):
        """Test full text."""
        event = started(timedelta(days=15), capacity=4, attendeesCount=4)
        assert continuity_text(event, NOW, "fr") == "Complet"

    def test_unknown_has_no_text(self):
        """Test events without a start have no badge."""
        assert continuity_text(Event(), NOW) is None


class TestSessionLabels:
    """Test frequency and mode labels."""

    def test_frequency_label(self):
        """Test frequency labels per locale."""
        assert frequency_label(SessionFrequency.WEEKLY) == "Weekly"
        assert frequency_label(SessionFrequency.ONE_TIME, "fr") == "Session unique"
        assert frequency_label(None) == ""

    def test_session_mode_label(self):
        """Test mode labels per locale."""
        assert session_mode_label(SessionMode.REMOTE, "en") == "Remote Session"
        assert session_mode_label(SessionMode.IN_PERSON, "fr") == "Session en personne"
