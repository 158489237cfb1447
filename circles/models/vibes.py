"""Vibe presets and custom vibes.

A vibe is either a preset owned by one canonical category or a custom vibe
authored by a host. Stored events may still carry bare strings from the
first generation of the taxonomy; coerce_vibe turns any stored shape into
one of the two variants so callers never inspect the raw form.
"""
import re
from enum import Enum
from types import MappingProxyType
from typing import Annotated, Any, Iterable, Literal, Mapping, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field

from circles.models.taxonomy import (
    BilingualLabel,
    CanonicalCategory,
    Locale,
    fold_text,
)

MAX_VIBE_LABEL_LENGTH = 28
MAX_VIBES = 3
MIN_VIBES = 1

CUSTOM_KEY_PREFIX = "custom_"
CUSTOM_SLUG_LENGTH = 30
CUSTOM_CHECKSUM_LENGTH = 6


class PresetVibe(BaseModel):
    """System-defined vibe belonging to exactly one category."""
    kind: Literal["preset"] = "preset"
    key: str
    label: BilingualLabel
    category: CanonicalCategory

    model_config = ConfigDict(frozen=True)


class CustomVibe(BaseModel):
    """Host-authored vibe with a generated key."""
    kind: Literal["custom"] = "custom"
    key: str
    label: BilingualLabel

    model_config = ConfigDict(frozen=True)


Vibe = Annotated[Union[PresetVibe, CustomVibe], Field(discriminator="kind")]


class RejectionReason(str, Enum):
    EMPTY_LABEL = "empty_label"
    LABEL_TOO_LONG = "label_too_long"
    MATCHES_PRESET = "matches_preset"
    ALREADY_SELECTED = "already_selected"
    TOO_FEW_VIBES = "too_few_vibes"
    TOO_MANY_VIBES = "too_many_vibes"


class VibeRejection(BaseModel):
    """User-correctable validation failure."""
    reason: RejectionReason
    message: str

    model_config = ConfigDict(frozen=True)


def _preset(key: str, en: str, fr: str, category: CanonicalCategory) -> PresetVibe:
    return PresetVibe(key=key, label=BilingualLabel(en=en, fr=fr), category=category)


# Declaration order is the order shown in pickers
VIBE_PRESETS_BY_CATEGORY: Mapping[CanonicalCategory, tuple[PresetVibe, ...]] = MappingProxyType({
    CanonicalCategory.EAT_DRINK: (
        _preset("private_chef", "Private Chef", "Chef privé", CanonicalCategory.EAT_DRINK),
        _preset("tasting_pairing", "Tasting / Pairing", "Dégustation / Accords", CanonicalCategory.EAT_DRINK),
        _preset("brunch_dinner_meetup", "Brunch / Dinner Meet-up", "Brunch / Souper social", CanonicalCategory.EAT_DRINK),
    ),
    CanonicalCategory.MOVE_FLOW: (
        _preset("pickleball", "Pickleball", "Pickleball", CanonicalCategory.MOVE_FLOW),
        _preset("soccer", "Soccer", "Soccer", CanonicalCategory.MOVE_FLOW),
        _preset("run_club", "Run Club", "Club de course", CanonicalCategory.MOVE_FLOW),
    ),
    CanonicalCategory.MAKE_CREATE: (
        _preset("hands_on_skill", "Hands-on Skill", "Compétence pratique", CanonicalCategory.MAKE_CREATE),
        _preset("beginner_friendly", "Beginner-friendly", "Débutant bienvenu", CanonicalCategory.MAKE_CREATE),
        _preset("practice_circle", "Practice Circle", "Cercle de pratique", CanonicalCategory.MAKE_CREATE),
    ),
    CanonicalCategory.TALK_THINK: (
        _preset("live_local", "Live & Local", "Scène locale", CanonicalCategory.TALK_THINK),
        _preset("creative_jam", "Creative Jam", "Jam créatif", CanonicalCategory.TALK_THINK),
        _preset("museums_exhibits", "Museums / Exhibits", "Musées / Expos", CanonicalCategory.TALK_THINK),
    ),
    CanonicalCategory.COMMUNITY_SUPPORT: (
        _preset("volunteer_give_back", "Volunteer / Give Back", "Bénévolat", CanonicalCategory.COMMUNITY_SUPPORT),
        _preset("support_circle", "Support Circle", "Cercle de soutien", CanonicalCategory.COMMUNITY_SUPPORT),
        _preset("local_action", "Local Action", "Action locale", CanonicalCategory.COMMUNITY_SUPPORT),
    ),
})

PRESETS_BY_KEY: Mapping[str, PresetVibe] = MappingProxyType({
    preset.key: preset
    for presets in VIBE_PRESETS_BY_CATEGORY.values()
    for preset in presets
})

# Both locales, folded
ALL_PRESET_LABELS: frozenset[str] = frozenset(
    fold_text(label)
    for preset in PRESETS_BY_KEY.values()
    for label in (preset.label.en, preset.label.fr)
)

# Slugged first-generation attribute vibes that still imply a category
LEGACY_VIBE_CATEGORIES: Mapping[str, CanonicalCategory] = MappingProxyType({
    "food_drink": CanonicalCategory.EAT_DRINK,
    "sports": CanonicalCategory.MOVE_FLOW,
    "movement": CanonicalCategory.MOVE_FLOW,
    "wellness": CanonicalCategory.MOVE_FLOW,
    "outdoors": CanonicalCategory.MOVE_FLOW,
    "spiritual": CanonicalCategory.MOVE_FLOW,
    "workshops": CanonicalCategory.MAKE_CREATE,
    "hands_on": CanonicalCategory.MAKE_CREATE,
    "learning": CanonicalCategory.MAKE_CREATE,
    "creative": CanonicalCategory.MAKE_CREATE,
    "music": CanonicalCategory.TALK_THINK,
    "shows": CanonicalCategory.TALK_THINK,
    "performances": CanonicalCategory.TALK_THINK,
    "curious": CanonicalCategory.TALK_THINK,
    "community": CanonicalCategory.COMMUNITY_SUPPORT,
    "social": CanonicalCategory.COMMUNITY_SUPPORT,
    "markets": CanonicalCategory.COMMUNITY_SUPPORT,
    "purposeful": CanonicalCategory.COMMUNITY_SUPPORT,
})

VIBE_CATEGORY_BY_KEY: Mapping[str, CanonicalCategory] = MappingProxyType({
    **{key: preset.category for key, preset in PRESETS_BY_KEY.items()},
    **LEGACY_VIBE_CATEGORIES,
})

_SLUG_SEPARATORS = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    """Lower-case ASCII slug with underscores."""
    return _SLUG_SEPARATORS.sub("_", fold_text(text)).strip("_")


def presets_for(category: CanonicalCategory | str) -> list[PresetVibe]:
    return list(VIBE_PRESETS_BY_CATEGORY[CanonicalCategory(category)])


def is_preset_vibe(key: str) -> bool:
    return key in PRESETS_BY_KEY


def label_matches_preset(label: str) -> bool:
    return fold_text(label) in ALL_PRESET_LABELS


def find_preset_by_key_or_label(text: str) -> Optional[PresetVibe]:
    """Find a preset by exact key or by either label (case-insensitive)."""
    stripped = text.strip()
    if stripped in PRESETS_BY_KEY:
        return PRESETS_BY_KEY[stripped]

    folded = fold_text(stripped)
    for preset in PRESETS_BY_KEY.values():
        if folded in (preset.key, fold_text(preset.label.en), fold_text(preset.label.fr)):
            return preset
    return None


def _rolling_hash(text: str) -> int:
    """FNV-1a over UTF-8 bytes, 32 bits."""
    value = 0x811C9DC5
    for byte in text.encode("utf-8"):
        value ^= byte
        value = (value * 0x01000193) & 0xFFFFFFFF
    return value


def custom_vibe_key(label_en: str, label_fr: str) -> str:
    """Deterministic key for a custom vibe.

    The slug keeps keys readable; the checksum is computed over the raw
    labels so different label pairs essentially never collide.
    """
    slug = slugify(f"{label_en}_{label_fr}")[:CUSTOM_SLUG_LENGTH].rstrip("_")
    checksum = format(_rolling_hash(f"{label_en}{label_fr}"), "08x")[:CUSTOM_CHECKSUM_LENGTH]
    return f"{CUSTOM_KEY_PREFIX}{slug}_{checksum}"


def validate_custom_labels(
    label_en: str,
    label_fr: str,
    existing: Iterable[Union[PresetVibe, CustomVibe]] = (),
) -> Optional[VibeRejection]:
    """Check a custom label pair. Returns None when valid."""
    en = label_en.strip()
    fr = label_fr.strip()

    if not en or not fr:
        return VibeRejection(
            reason=RejectionReason.EMPTY_LABEL,
            message="Both EN and FR labels are required",
        )

    if len(en) > MAX_VIBE_LABEL_LENGTH or len(fr) > MAX_VIBE_LABEL_LENGTH:
        return VibeRejection(
            reason=RejectionReason.LABEL_TOO_LONG,
            message=f"Labels must be {MAX_VIBE_LABEL_LENGTH} characters or less",
        )

    if label_matches_preset(en) or label_matches_preset(fr):
        return VibeRejection(
            reason=RejectionReason.MATCHES_PRESET,
            message="This label matches an existing preset",
        )

    # Cross-locale: a word may be one vibe's EN label and another's FR label
    candidates = {fold_text(en), fold_text(fr)}
    for vibe in existing:
        if candidates & {fold_text(vibe.label.en), fold_text(vibe.label.fr)}:
            return VibeRejection(
                reason=RejectionReason.ALREADY_SELECTED,
                message="This label is already selected",
            )

    return None


def create_custom_vibe(
    label_en: str,
    label_fr: str,
    existing: Iterable[Union[PresetVibe, CustomVibe]] = (),
) -> Union[CustomVibe, VibeRejection]:
    """Build a custom vibe, or return why the labels were rejected."""
    rejection = validate_custom_labels(label_en, label_fr, existing)
    if rejection is not None:
        return rejection

    return CustomVibe(
        key=custom_vibe_key(label_en, label_fr),
        label=BilingualLabel(en=label_en.strip(), fr=label_fr.strip()),
    )


def validate_vibe_selection(vibes: Sequence[Union[PresetVibe, CustomVibe]]) -> Optional[VibeRejection]:
    """Events carry between MIN_VIBES and MAX_VIBES distinct vibes."""
    count = len(dedupe_vibes(vibes))
    if count < MIN_VIBES:
        return VibeRejection(
            reason=RejectionReason.TOO_FEW_VIBES,
            message=f"Select at least {MIN_VIBES} vibe",
        )
    if count > MAX_VIBES:
        return VibeRejection(
            reason=RejectionReason.TOO_MANY_VIBES,
            message=f"Select at most {MAX_VIBES} vibes",
        )
    return None


def coerce_vibe(raw: Any) -> Union[PresetVibe, CustomVibe]:
    """Turn a stored vibe (bare string or mapping) into a typed vibe.

    Raises ValueError for shapes that are neither.
    """
    if isinstance(raw, (PresetVibe, CustomVibe)):
        return raw

    if isinstance(raw, str):
        preset = find_preset_by_key_or_label(raw)
        if preset is not None:
            return preset
        text = raw.strip()
        return CustomVibe(key=slugify(text), label=BilingualLabel(en=text, fr=text))

    if isinstance(raw, Mapping):
        key = raw.get("key")
        if isinstance(key, str) and key in PRESETS_BY_KEY:
            return PRESETS_BY_KEY[key]

        label = raw.get("label")
        if isinstance(label, str):
            label = {"en": label, "fr": label}
        elif not isinstance(label, Mapping):
            # Unusable label shape; fall back to the key
            label = {}
        en = label.get("en") or label.get("fr") or key or ""
        fr = label.get("fr") or en
        if not key:
            key = custom_vibe_key(en, fr)
        return CustomVibe(key=key, label=BilingualLabel(en=en, fr=fr))

    raise ValueError(f"Unsupported vibe value: {raw!r}")


def vibe_label(vibe: Union[PresetVibe, CustomVibe], locale: Locale | str) -> str:
    return vibe.label.for_locale(locale)


def dedupe_vibes(vibes: Iterable[Union[PresetVibe, CustomVibe]]) -> list[Union[PresetVibe, CustomVibe]]:
    """Drop repeated keys, keeping the first occurrence."""
    seen: set[str] = set()
    out = []
    for vibe in vibes:
        if vibe.key in seen:
            continue
        seen.add(vibe.key)
        out.append(vibe)
    return out
