"""Canonical category taxonomy for circles.

Five canonical categories are active. Every key or label used by earlier
generations of the taxonomy resolves to one of them through the alias
table below. The alias table is append-only: entries are never removed or
re-pointed once released, new generations only add rows.
"""
import re
import unicodedata
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict


class Locale(str, Enum):
    """Supported display locales."""
    EN = "en"
    FR = "fr"

    # Aliases
    PRIMARY = "en"
    SECONDARY = "fr"


class CanonicalCategory(str, Enum):
    """Current generation of circle categories."""
    EAT_DRINK = "eatDrink"
    MOVE_FLOW = "moveFlow"
    MAKE_CREATE = "makeCreate"
    TALK_THINK = "talkThink"
    COMMUNITY_SUPPORT = "communitySupport"


class BilingualLabel(BaseModel):
    """Display label in both supported locales."""
    en: str
    fr: str

    model_config = ConfigDict(frozen=True)

    def for_locale(self, locale: Locale | str) -> str:
        return getattr(self, Locale(locale).value)


# Most general category, used when nothing else can be derived
DEFAULT_CATEGORY = CanonicalCategory.COMMUNITY_SUPPORT

CATEGORY_LABELS: Mapping[CanonicalCategory, BilingualLabel] = MappingProxyType({
    CanonicalCategory.EAT_DRINK: BilingualLabel(en="Food & Drink", fr="Cuisine & Boissons"),
    CanonicalCategory.MOVE_FLOW: BilingualLabel(en="Sports & Recreation", fr="Sports & Loisirs"),
    CanonicalCategory.MAKE_CREATE: BilingualLabel(en="Workshops & Skills", fr="Ateliers & Compétences"),
    CanonicalCategory.TALK_THINK: BilingualLabel(en="Arts & Culture", fr="Arts & Culture"),
    CanonicalCategory.COMMUNITY_SUPPORT: BilingualLabel(en="Community & Causes", fr="Communauté & Causes"),
})

# Former keys and labels, grouped by the canonical category they resolve to.
# Canonical keys and current labels are indexed automatically.
LEGACY_CATEGORY_ALIASES: Mapping[CanonicalCategory, tuple[str, ...]] = MappingProxyType({
    CanonicalCategory.EAT_DRINK: (
        # first-generation attribute vibes
        "Food & Drink", "Food and Drink", "Food",
        # pillar labels
        "Eat & Drink", "eat_drink", "Manger & Boire", "Dining",
    ),
    CanonicalCategory.MOVE_FLOW: (
        "Sports", "Sport", "Wellness", "Fitness", "Outdoors",
        "Move & Flow", "move_flow", "Bouger",
    ),
    CanonicalCategory.MAKE_CREATE: (
        "Workshops", "Workshop", "Hands-On",
        # four-pillar generation
        "learnAndGrow", "Learn & Grow", "learn_and_grow", "Apprendre & Grandir",
        "experiences",
        "Make & Create", "make_create", "Créer",
    ),
    CanonicalCategory.TALK_THINK: (
        "Arts", "Culture", "Music", "Shows", "Performances",
        "Talk & Think", "talk_think",
    ),
    CanonicalCategory.COMMUNITY_SUPPORT: (
        "Community", "Causes", "social", "gatherings",
        # four-pillar generation
        "connectPromote", "connectAndPromote", "Connect & Promote",
        "mobilizeSupport", "mobilizeAndSupport", "Mobilize & Support",
        "curatedSales", "Curated Sales", "shopping", "Markets",
        "sell_and_shop", "Sell & Shop",
        "community_support",
    ),
})

_NON_ALNUM = re.compile(r"[\W_]+")


def fold_text(value: str) -> str:
    """Case-fold, strip accents and collapse whitespace."""
    text = unicodedata.normalize("NFKD", value)
    text = "".join(c for c in text if not unicodedata.combining(c))
    return " ".join(text.split()).casefold()


def strip_text(value: str) -> str:
    """Folded form with every non-alphanumeric character removed."""
    return _NON_ALNUM.sub("", fold_text(value))


def _equivalents(category: CanonicalCategory) -> list[str]:
    label = CATEGORY_LABELS[category]
    return [category.value, label.en, label.fr, *LEGACY_CATEGORY_ALIASES[category]]


def _build_index(key_fn) -> Mapping[str, CanonicalCategory]:
    index: dict[str, CanonicalCategory] = {}
    for category in CanonicalCategory:
        for alias in _equivalents(category):
            key = key_fn(alias)
            existing = index.get(key)
            if existing is not None and existing is not category:
                raise ValueError(
                    f"Alias {alias!r} resolves to both {existing.value} and {category.value}"
                )
            index[key] = category
    return MappingProxyType(index)


_FOLDED_INDEX = _build_index(fold_text)
_STRIPPED_INDEX = _build_index(strip_text)


def normalize_category(raw: Optional[str]) -> Optional[CanonicalCategory]:
    """Resolve any known key or label to its canonical category.

    Lookup order: exact canonical key, folded alias, alias with all
    punctuation and spacing removed. Returns None when nothing matches.
    """
    if raw is None:
        return None
    if isinstance(raw, CanonicalCategory):
        return raw
    if not isinstance(raw, str):
        return None

    try:
        return CanonicalCategory(raw)
    except ValueError:
        pass

    folded = fold_text(raw)
    if not folded:
        return None
    if folded in _FOLDED_INDEX:
        return _FOLDED_INDEX[folded]
    return _STRIPPED_INDEX.get(strip_text(raw))


def label_of(category: CanonicalCategory | str, locale: Locale | str) -> str:
    """Display label for a canonical key.

    Raises ValueError for an unknown key or locale.
    """
    return CATEGORY_LABELS[CanonicalCategory(category)].for_locale(locale)


def category_options(locale: Locale | str) -> list[tuple[str, str]]:
    """(key, label) pairs in declaration order."""
    return [(category.value, label_of(category, locale)) for category in CanonicalCategory]


def equivalent_strings(category: CanonicalCategory) -> frozenset[str]:
    """Keys and labels that mean `category`, case-folded.

    Each string appears both with its accents (as a casefold of the raw
    stored value gives) and accent-folded.
    """
    strings: set[str] = set()
    for alias in _equivalents(category):
        strings.add(" ".join(alias.split()).casefold())
        strings.add(fold_text(alias))
    return frozenset(strings)
