"""Event and taxonomy handler for HTTP requests."""
import logging
from datetime import datetime
from typing import Optional, Union

from circles.metrics import CUSTOM_VIBE_RESULTS_TOTAL
from circles.models.catalog import CategoryAliases, CategoryOption, CustomVibeRequest, VibeOption
from circles.models.event import EventCard
from circles.models.event_filter import FilterSpec
from circles.models.taxonomy import Locale, category_options, normalize_category
from circles.models.vibes import (
    CustomVibe,
    VibeRejection,
    create_custom_vibe,
    presets_for,
    validate_vibe_selection,
)
from circles.services.classifier import legacy_matches_canonical
from circles.services.event_service import EventService

logger = logging.getLogger(__name__)


class EventHandler:
    """Handler for event listing and taxonomy requests."""

    def __init__(self, event_service: EventService, default_locale: Locale = Locale.EN):
        """Initialize event handler.

        Args:
            event_service: Service that loads, filters and annotates events
            default_locale: Locale used when a request does not name one
        """
        self.event_service = event_service
        self.default_locale = default_locale

    def filter_events(
        self, spec: FilterSpec, locale: Locale, now: Optional[datetime] = None
    ) -> list[EventCard]:
        """Events matching every active filter, in storage order."""
        logger.info(
            f"[EventHandler] FilterEvents: active={spec.active_filter_count()}, locale={locale.value}"
        )
        result = self.event_service.find_events(spec, locale, now)
        logger.info(f"[EventHandler] Returning {len(result)} events")
        return result

    def get_event(self, event_id: str, locale: Locale) -> Optional[EventCard]:
        return self.event_service.get_event(event_id, locale)

    def list_categories(self, locale: Locale) -> list[CategoryOption]:
        return [CategoryOption(key=key, label=label) for key, label in category_options(locale)]

    def list_presets(self, category_key: str, locale: Locale) -> Optional[list[VibeOption]]:
        """Preset vibes of a category, or None if the key resolves to nothing.

        Legacy keys are accepted and resolved to their canonical category.
        """
        category = normalize_category(category_key)
        if category is None:
            return None
        return [
            VibeOption(key=preset.key, label=preset.label.for_locale(locale), category=category)
            for preset in presets_for(category)
        ]

    def category_aliases(self, category_key: str) -> Optional[CategoryAliases]:
        category = normalize_category(category_key)
        if category is None:
            return None
        return CategoryAliases(key=category, aliases=sorted(legacy_matches_canonical(category)))

    def create_custom_vibe(self, request: CustomVibeRequest) -> Union[CustomVibe, VibeRejection]:
        """Create a custom vibe or explain why it is not accepted.

        Besides the label checks, the new vibe must fit within the per-event
        vibe limit alongside `request.existing`.
        """
        result = create_custom_vibe(request.label_en, request.label_fr, request.existing)
        if isinstance(result, CustomVibe):
            result = validate_vibe_selection([*request.existing, result]) or result

        if isinstance(result, VibeRejection):
            CUSTOM_VIBE_RESULTS_TOTAL.labels(result=result.reason.value).inc()
            logger.info(f"[EventHandler] Custom vibe rejected: {result.reason.value}")
        else:
            CUSTOM_VIBE_RESULTS_TOTAL.labels(result="created").inc()
            logger.info(f"[EventHandler] Custom vibe created: {result.key}")
        return result

    def ping(self) -> dict[str, str]:
        """Health check endpoint.

        Returns:
            {"status": "pong"}
        """
        logger.debug("[EventHandler] Ping")
        return {"status": "pong"}
