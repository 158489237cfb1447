"""Unit tests for the category taxonomy table."""
import pytest

from circles.models.taxonomy import (
    CATEGORY_LABELS,
    DEFAULT_CATEGORY,
    LEGACY_CATEGORY_ALIASES,
    CanonicalCategory,
    Locale,
    category_options,
    fold_text,
    label_of,
    normalize_category,
    strip_text,
)

ALIAS_CASES = [
    (alias, category)
    for category, aliases in LEGACY_CATEGORY_ALIASES.items()
    for alias in aliases
]


class TestNormalizeCategory:
    """Test alias resolution."""

    @pytest.mark.parametrize("alias,category", ALIAS_CASES)
    def test_every_alias_resolves(self, alias, category):
        """Test each legacy alias maps to its canonical category."""
        assert normalize_category(alias) is category

    @pytest.mark.parametrize("alias,category", ALIAS_CASES)
    def test_alias_resolution_ignores_case_and_padding(self, alias, category):
        """Test aliases resolve under casing changes and whitespace padding."""
        assert normalize_category(f"  {alias.upper()}\t") is category
        assert normalize_category(f"\n{alias.swapcase()} ") is category
        assert normalize_category(alias.lower()) is category

    @pytest.mark.parametrize("category", list(CanonicalCategory))
    def test_canonical_keys_are_idempotent(self, category):
        """Test normalizing a canonical key returns the same category."""
        assert normalize_category(category.value) is category
        assert normalize_category(category) is category

    @pytest.mark.parametrize("category", list(CanonicalCategory))
    def test_current_labels_resolve(self, category):
        """Test both locale labels of a category resolve back to it."""
        label = CATEGORY_LABELS[category]
        assert normalize_category(label.en) is category
        assert normalize_category(label.fr) is category

    @pytest.mark.parametrize(
        "raw", ["sell_and_shop", "sellAndShop", "Sell & Shop", "SELL-AND-SHOP", "sell  and  shop"]
    )
    def test_key_style_variants(self, raw):
        """Test snake, camel and label spellings of the same alias."""
        assert normalize_category(raw) is CanonicalCategory.COMMUNITY_SUPPORT

    def test_accents_are_ignored(self):
        """Test French labels resolve without their accents."""
        assert normalize_category("ateliers & competences") is CanonicalCategory.MAKE_CREATE
        assert normalize_category("COMMUNAUTÉ & CAUSES") is CanonicalCategory.COMMUNITY_SUPPORT

    def test_four_pillar_generation_keys(self):
        """Test keys from the previous generation map onto the current set."""
        assert normalize_category("connectPromote") is CanonicalCategory.COMMUNITY_SUPPORT
        assert normalize_category("mobilizeAndSupport") is CanonicalCategory.COMMUNITY_SUPPORT
        assert normalize_category("learnAndGrow") is CanonicalCategory.MAKE_CREATE
        assert normalize_category("curatedSales") is CanonicalCategory.COMMUNITY_SUPPORT

    @pytest.mark.parametrize("raw", [None, "", "   ", "underwater basket weaving", "&&", 42])
    def test_unresolvable_returns_none(self, raw):
        """Test unknown values return None instead of raising."""
        assert normalize_category(raw) is None


class TestAliasTable:
    """Test structural properties of the alias table."""

    def test_folded_aliases_are_unique_across_categories(self):
        """Test no folded alias belongs to two categories."""
        owners = {}
        for category, aliases in LEGACY_CATEGORY_ALIASES.items():
            for alias in aliases:
                owners.setdefault(fold_text(alias), set()).add(category)
        assert all(len(categories) == 1 for categories in owners.values())

    def test_stripped_aliases_are_unique_across_categories(self):
        """Test no stripped alias belongs to two categories."""
        owners = {}
        for category, aliases in LEGACY_CATEGORY_ALIASES.items():
            for alias in (*aliases, category.value):
                owners.setdefault(strip_text(alias), set()).add(category)
        assert all(len(categories) == 1 for categories in owners.values())

    def test_default_category_is_canonical(self):
        """Test the fallback category is part of the active set."""
        assert DEFAULT_CATEGORY in CanonicalCategory


class TestLabels:
    """Test display labels."""

    def test_label_of_each_locale(self):
        """Test labels in both locales."""
        assert label_of(CanonicalCategory.TALK_THINK, Locale.EN) == "Arts & Culture"
        assert label_of("eatDrink", "fr") == "Cuisine & Boissons"
        assert label_of("moveFlow", Locale.SECONDARY) == "Sports & Loisirs"

    def test_locale_aliases(self):
        """Test primary and secondary are the EN and FR members."""
        assert Locale.PRIMARY is Locale.EN
        assert Locale.SECONDARY is Locale.FR
        assert list(Locale) == [Locale.EN, Locale.FR]

    def test_unknown_key_fails_loudly(self):
        """Test an unknown canonical key is a programmer error."""
        with pytest.raises(ValueError):
            label_of("Sports", Locale.EN)

    def test_unknown_locale_fails_loudly(self):
        """Test an unsupported locale is a programmer error."""
        with pytest.raises(ValueError):
            label_of(CanonicalCategory.EAT_DRINK, "de")

    def test_category_options_keep_declaration_order(self):
        """Test picker options follow the enum order."""
        options = category_options(Locale.EN)
        assert [key for key, _ in options] == [c.value for c in CanonicalCategory]
        assert options[0] == ("eatDrink", "Food & Drink")
