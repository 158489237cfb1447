"""Compound filter evaluation over in-memory event collections."""
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional

import pytz

from circles.models.event import Event
from circles.models.event_filter import GROUP_SIZE_RANGES, FilterSpec, GroupSizeBand
from circles.models.taxonomy import fold_text
from circles.services.classifier import resolve_category
from circles.services.continuity import continuity_status

Predicate = Callable[[Event], bool]


def group_size_band_of(capacity: Optional[int]) -> Optional[GroupSizeBand]:
    """Band containing `capacity`; None for unlimited or too-small capacity."""
    if capacity is None:
        return None
    for band, (low, high) in GROUP_SIZE_RANGES.items():
        if capacity >= low and (high is None or capacity <= high):
            return band
    return None


def _same_place(expected: str) -> Predicate:
    wanted = fold_text(expected)

    def check(value: Optional[str]) -> bool:
        return value is not None and fold_text(value) == wanted

    return check


def build_predicates(
    spec: FilterSpec,
    now: datetime,
    tz: Optional[pytz.BaseTzInfo] = None,
) -> list[tuple[str, Predicate]]:
    """One (dimension, predicate) pair per active dimension."""
    predicates: list[tuple[str, Predicate]] = []

    if spec.category is not None:
        category = spec.category
        predicates.append(("category", lambda e: resolve_category(e) is category))

    if spec.country:
        country_matches = _same_place(spec.country)
        predicates.append(("country", lambda e: country_matches(e.country)))

    if spec.city:
        city_matches = _same_place(spec.city)
        predicates.append(("city", lambda e: city_matches(e.city)))

    if spec.group_size is not None:
        band = spec.group_size
        predicates.append(("group_size", lambda e: group_size_band_of(e.capacity) is band))

    if spec.session_frequencies:
        frequencies = spec.session_frequencies
        predicates.append(
            ("session_frequency", lambda e: e.session_frequency in frequencies)
        )

    if spec.session_modes:
        modes = spec.session_modes
        predicates.append(("session_mode", lambda e: e.session_mode in modes))

    if spec.vibes:
        accepted = spec.vibes
        predicates.append(
            ("vibes", lambda e: any(vibe.key in accepted for vibe in e.vibes))
        )

    if spec.circle_continuity is not None:
        wanted_status = spec.circle_continuity.status
        predicates.append(
            ("circle_continuity", lambda e: continuity_status(e, now, tz) is wanted_status)
        )

    return predicates


def apply_filters(
    events: Iterable[Event],
    spec: FilterSpec,
    now: Optional[datetime] = None,
    tz: Optional[pytz.BaseTzInfo] = None,
) -> list[Event]:
    """Subset of `events` satisfying every active dimension, in input order.

    Dimensions combine with AND; values inside the frequency, mode and vibe
    sets combine with OR.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    filtered = list(events)
    for _, predicate in build_predicates(spec, now, tz):
        filtered = [event for event in filtered if predicate(event)]
    return filtered
