"""Data models package."""
from circles.models.taxonomy import (
    Locale,
    CanonicalCategory,
    BilingualLabel,
    DEFAULT_CATEGORY,
)
from circles.models.vibes import (
    PresetVibe,
    CustomVibe,
    Vibe,
    VibeRejection,
    RejectionReason,
)
from circles.models.event import (
    Event,
    EventCard,
    ContinuityStatus,
    SessionFrequency,
    SessionMode,
)
from circles.models.event_filter import (
    FilterSpec,
    GroupSizeBand,
    ContinuityChoice,
)

__all__ = [
    # Taxonomy
    "Locale",
    "CanonicalCategory",
    "BilingualLabel",
    "DEFAULT_CATEGORY",
    # Vibes
    "PresetVibe",
    "CustomVibe",
    "Vibe",
    "VibeRejection",
    "RejectionReason",
    # Events
    "Event",
    "EventCard",
    "ContinuityStatus",
    "SessionFrequency",
    "SessionMode",
    # Filters
    "FilterSpec",
    "GroupSizeBand",
    "ContinuityChoice",
]
