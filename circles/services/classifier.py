"""Category resolution for events stored under any taxonomy generation.

Classification is recomputed on every read and never written back, so the
derived view always follows the current alias tables even for documents
that predate them.
"""
from enum import Enum

from circles.models.event import Event
from circles.models.taxonomy import (
    DEFAULT_CATEGORY,
    CanonicalCategory,
    Locale,
    equivalent_strings,
    label_of,
    normalize_category,
)
from circles.models.vibes import VIBE_CATEGORY_BY_KEY


class ResolutionSource(str, Enum):
    """Which step of the derivation produced the category."""
    MAIN_CATEGORY = "main_category"
    VIBE = "vibe"
    LEGACY_CATEGORY = "legacy_category"
    DEFAULT = "default"


def resolve_category_with_source(event: Event) -> tuple[CanonicalCategory, ResolutionSource]:
    """Resolve the canonical category and report where it came from.

    Order: mainCategory, first vibe with a known category, legacy category
    field, then the default category.
    """
    category = normalize_category(event.main_category)
    if category is not None:
        return category, ResolutionSource.MAIN_CATEGORY

    for vibe in event.vibes:
        category = VIBE_CATEGORY_BY_KEY.get(vibe.key)
        if category is not None:
            return category, ResolutionSource.VIBE

    category = normalize_category(event.category)
    if category is not None:
        return category, ResolutionSource.LEGACY_CATEGORY

    return DEFAULT_CATEGORY, ResolutionSource.DEFAULT


def resolve_category(event: Event) -> CanonicalCategory:
    """Canonical category of an event. Never None."""
    return resolve_category_with_source(event)[0]


def label_for(event: Event, locale: Locale | str) -> str:
    return label_of(resolve_category(event), locale)


def legacy_matches_canonical(category: CanonicalCategory | str) -> frozenset[str]:
    """Every case-folded key and label stored documents may use for `category`.

    For queries that match raw stored values and cannot run the classifier.
    """
    return equivalent_strings(CanonicalCategory(category))
