"""Filter specification models for event listing."""
from enum import Enum
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from circles.models.event import (
    ContinuityStatus,
    SessionFrequency,
    SessionMode,
    parse_session_frequency,
    parse_session_mode,
)
from circles.models.taxonomy import CanonicalCategory, normalize_category


class GroupSizeBand(str, Enum):
    """Capacity bands offered in the filter drawer."""
    TINY = "tiny"      # 2-5
    SMALL = "small"    # 6-10
    LARGER = "larger"  # 11+


# Inclusive (min, max) capacity per band; max None means open-ended
GROUP_SIZE_RANGES: dict[GroupSizeBand, tuple[int, Optional[int]]] = {
    GroupSizeBand.TINY: (2, 5),
    GroupSizeBand.SMALL: (6, 10),
    GroupSizeBand.LARGER: (11, None),
}


class ContinuityChoice(str, Enum):
    """User-facing continuity filter."""
    STARTING_SOON = "startingSoon"
    ONGOING = "ongoing"

    @property
    def status(self) -> ContinuityStatus:
        if self is ContinuityChoice.STARTING_SOON:
            return ContinuityStatus.NOT_STARTED
        return ContinuityStatus.IN_PROGRESS_WITH_ROOM


def _split_csv(value: Any) -> Any:
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    return value


class FilterSpec(BaseModel):
    """Independent optional constraints; None or empty means unconstrained."""
    category: Optional[CanonicalCategory] = Field(default=None, alias="mainCategory")
    country: Optional[str] = None
    city: Optional[str] = None
    group_size: Optional[GroupSizeBand] = Field(default=None, alias="groupSize")
    session_frequencies: frozenset[SessionFrequency] = Field(
        default_factory=frozenset, alias="sessionFrequency"
    )
    session_modes: frozenset[SessionMode] = Field(default_factory=frozenset, alias="sessionMode")
    vibes: frozenset[str] = Field(default_factory=frozenset)
    circle_continuity: Optional[ContinuityChoice] = Field(default=None, alias="circleContinuity")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @field_validator("category", mode="before")
    @classmethod
    def resolve_category(cls, v: Any) -> Optional[CanonicalCategory]:
        """Accept legacy keys and labels; reject values that resolve to nothing."""
        if v is None or v == "" or v == "All":
            return None
        category = normalize_category(v)
        if category is None:
            raise ValueError(f"Unknown category: {v!r}")
        return category

    @field_validator("country", "city", "group_size", "circle_continuity", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("session_frequencies", mode="before")
    @classmethod
    def parse_frequencies(cls, v: Any) -> Any:
        values = _split_csv(v) or []
        parsed = [parse_session_frequency(item) for item in values]
        if any(p is None for p in parsed):
            raise ValueError(f"Unknown session frequency in {values!r}")
        return parsed

    @field_validator("session_modes", mode="before")
    @classmethod
    def parse_modes(cls, v: Any) -> Any:
        values = _split_csv(v) or []
        parsed = [parse_session_mode(item) for item in values]
        if any(p is None for p in parsed):
            raise ValueError(f"Unknown session mode in {values!r}")
        return parsed

    @field_validator("vibes", mode="before")
    @classmethod
    def parse_vibes(cls, v: Any) -> Any:
        return _split_csv(v) or []

    def active_filter_count(self) -> int:
        """Number of constrained dimensions."""
        return len(self.active_dimensions())

    def active_dimensions(self) -> list[str]:
        dimensions = []
        if self.category is not None:
            dimensions.append("category")
        if self.country:
            dimensions.append("country")
        if self.city:
            dimensions.append("city")
        if self.group_size is not None:
            dimensions.append("group_size")
        if self.session_frequencies:
            dimensions.append("session_frequency")
        if self.session_modes:
            dimensions.append("session_mode")
        if self.vibes:
            dimensions.append("vibes")
        if self.circle_continuity is not None:
            dimensions.append("circle_continuity")
        return dimensions

    def is_unconstrained(self) -> bool:
        return not self.active_dimensions()

    @classmethod
    def from_query_params(cls, params: Mapping[str, Optional[str]]) -> "FilterSpec":
        """Build a spec from raw query-string values, ignoring empty ones."""
        return cls.model_validate({k: v for k, v in params.items() if v not in (None, "")})
