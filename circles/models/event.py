"""Event records as read from the document store."""
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from circles.models.taxonomy import CanonicalCategory, strip_text
from circles.models.vibes import CustomVibe, PresetVibe, Vibe, coerce_vibe


class SessionFrequency(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    ONE_TIME = "oneTime"


class SessionMode(str, Enum):
    IN_PERSON = "inPerson"
    REMOTE = "remote"


class ContinuityStatus(str, Enum):
    """Where a circle stands relative to its first session."""
    NOT_STARTED = "notStarted"
    IN_PROGRESS_WITH_ROOM = "inProgressWithRoom"
    IN_PROGRESS_FULL = "inProgressFull"
    UNKNOWN = "unknown"


def _enum_lookup(enum_cls: type[Enum]) -> dict[str, Enum]:
    # "One-Time", "oneTime" and "one_time" all strip to "onetime"
    return {strip_text(member.value): member for member in enum_cls}


_FREQUENCIES = _enum_lookup(SessionFrequency)
_MODES = _enum_lookup(SessionMode)


def parse_session_frequency(value: Any) -> Optional[SessionFrequency]:
    """Normalize current and legacy spellings; unknown values become None."""
    if isinstance(value, SessionFrequency):
        return value
    if not isinstance(value, str):
        return None
    return _FREQUENCIES.get(strip_text(value))


def parse_session_mode(value: Any) -> Optional[SessionMode]:
    if isinstance(value, SessionMode):
        return value
    if not isinstance(value, str):
        return None
    return _MODES.get(strip_text(value))


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _from_epoch_seconds(seconds: float) -> Optional[datetime]:
    """UTC datetime, or None when the value is out of range or not finite."""
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


class Event(BaseModel):
    """Circle event document.

    Field names follow the stored camelCase documents; unknown fields are
    ignored. Derived values (category, continuity) are never stored here.
    """
    id: str = ""
    title: str = ""
    host_id: Optional[str] = Field(default=None, alias="hostId")

    # Classification, oldest generation first
    category: Optional[str] = None
    main_category: Optional[str] = Field(default=None, alias="mainCategory")
    vibes: list[Vibe] = Field(default_factory=list)

    # Capacity: None means unlimited
    capacity: Optional[int] = None
    attendees_count: Optional[int] = Field(default=None, alias="attendeesCount")

    # Scheduling
    start_date: Optional[datetime] = Field(default=None, alias="startDate")
    date: Optional[str] = None  # YYYY-MM-DD
    time: Optional[str] = None  # HH:MM
    session_frequency: Optional[SessionFrequency] = Field(default=None, alias="sessionFrequency")
    session_mode: Optional[SessionMode] = Field(default=None, alias="sessionMode")

    # Location
    city: Optional[str] = None
    country: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("vibes", mode="before")
    @classmethod
    def coerce_vibes(cls, v: Any) -> list[Union[PresetVibe, CustomVibe]]:
        """Resolve bare-string and mapping vibes into typed vibes."""
        if v is None:
            return []
        if isinstance(v, (str, dict)):
            v = [v]
        if not isinstance(v, (list, tuple)):
            raise ValueError(f"vibes must be a list, got {type(v).__name__}")
        return [
            coerce_vibe(item)
            for item in v
            if item is not None and not (isinstance(item, str) and not item.strip())
        ]

    @field_validator("capacity", "attendees_count", mode="before")
    @classmethod
    def coerce_count(cls, v: Any) -> Optional[int]:
        """Stored counts are sometimes floats or numeric strings."""
        if v is None or v == "":
            return None
        if isinstance(v, bool):
            return None
        try:
            return int(float(v))
        except (TypeError, ValueError, OverflowError):
            return None

    @field_validator("start_date", mode="before")
    @classmethod
    def coerce_start_date(cls, v: Any) -> Any:
        """Accept datetimes, ISO strings, epoch milliseconds and timestamp maps."""
        if v is None or v == "":
            return None
        if isinstance(v, dict):
            seconds = v.get("seconds", v.get("_seconds"))
            nanos = v.get("nanoseconds", v.get("_nanoseconds", 0)) or 0
            if not _is_number(seconds) or not _is_number(nanos):
                return None
            return _from_epoch_seconds(seconds + nanos / 1e9)
        if _is_number(v):
            return _from_epoch_seconds(v / 1000)
        return v

    @field_validator("start_date")
    @classmethod
    def assume_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @field_validator("session_frequency", mode="before")
    @classmethod
    def coerce_frequency(cls, v: Any) -> Optional[SessionFrequency]:
        return parse_session_frequency(v)

    @field_validator("session_mode", mode="before")
    @classmethod
    def coerce_mode(cls, v: Any) -> Optional[SessionMode]:
        return parse_session_mode(v)

    def vibe_keys(self) -> list[str]:
        return [vibe.key for vibe in self.vibes]


class EventCard(BaseModel):
    """Event annotated with derived classification and status for display."""
    id: str
    title: str
    main_category: CanonicalCategory
    category_label: str
    vibes: list[Vibe] = []
    vibe_labels: list[str] = []
    city: Optional[str] = None
    country: Optional[str] = None
    capacity: Optional[int] = None
    remaining_capacity: Optional[int] = None
    session_frequency: Optional[SessionFrequency] = None
    session_frequency_label: str = ""
    session_mode: Optional[SessionMode] = None
    session_mode_label: str = ""
    start_date: Optional[datetime] = None
    continuity_status: ContinuityStatus = ContinuityStatus.UNKNOWN
    continuity_text: Optional[str] = None
