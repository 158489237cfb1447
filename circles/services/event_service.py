"""Event listing service: load, filter and annotate events."""
import logging
import time
from datetime import datetime, timezone
from typing import Optional

import pytz

from circles.dao.redis_event_dao import RedisEventDAO
from circles.metrics import (
    CATEGORY_RESOLUTIONS_TOTAL,
    EVENT_FILTER_DURATION_SECONDS,
    EVENT_FILTER_REQUESTS_TOTAL,
    EVENT_FILTER_RESULT_SIZE,
    EVENTS_STORED,
)
from circles.models.event import Event, EventCard
from circles.models.event_filter import FilterSpec
from circles.models.taxonomy import Locale, label_of
from circles.models.vibes import vibe_label
from circles.services.classifier import resolve_category_with_source
from circles.services.continuity import (
    continuity_status,
    continuity_text,
    frequency_label,
    remaining_capacity,
    session_mode_label,
)
from circles.services.event_filter_service import apply_filters

logger = logging.getLogger(__name__)


class EventService:
    """Service for event queries over the document store."""

    def __init__(self, event_dao: RedisEventDAO, tz: Optional[pytz.BaseTzInfo] = None):
        """Initialize event service.

        Args:
            event_dao: Redis DAO for event documents
            tz: Zone used for events stored with separate date and time fields
        """
        self.event_dao = event_dao
        self.tz = tz

    def find_events(
        self,
        spec: FilterSpec,
        locale: Locale = Locale.EN,
        now: Optional[datetime] = None,
    ) -> list[EventCard]:
        """Filter all stored events and annotate the matches for display."""
        now = now or datetime.now(timezone.utc)
        start_time = time.perf_counter()

        dimensions = spec.active_dimensions() or ["none"]
        for dimension in dimensions:
            EVENT_FILTER_REQUESTS_TOTAL.labels(dimension=dimension).inc()

        events = self.event_dao.list_events()
        EVENTS_STORED.set(len(events))

        matches = apply_filters(events, spec, now=now, tz=self.tz)
        cards = [self.annotate(event, locale, now) for event in matches]

        EVENT_FILTER_RESULT_SIZE.observe(len(cards))
        EVENT_FILTER_DURATION_SECONDS.observe(time.perf_counter() - start_time)
        logger.info(
            f"[EventService] Filter {','.join(dimensions)}: "
            f"{len(cards)} of {len(events)} events matched"
        )
        return cards

    def get_event(
        self, event_id: str, locale: Locale = Locale.EN, now: Optional[datetime] = None
    ) -> Optional[EventCard]:
        event = self.event_dao.get_event(event_id)
        if event is None:
            return None
        return self.annotate(event, locale, now or datetime.now(timezone.utc))

    def annotate(self, event: Event, locale: Locale, now: datetime) -> EventCard:
        """Attach derived category, labels and continuity to an event."""
        category, source = resolve_category_with_source(event)
        CATEGORY_RESOLUTIONS_TOTAL.labels(source=source.value).inc()

        return EventCard(
            id=event.id,
            title=event.title,
            main_category=category,
            category_label=label_of(category, locale),
            vibes=event.vibes,
            vibe_labels=[vibe_label(vibe, locale) for vibe in event.vibes],
            city=event.city,
            country=event.country,
            capacity=event.capacity,
            remaining_capacity=remaining_capacity(event),
            session_frequency=event.session_frequency,
            session_frequency_label=frequency_label(event.session_frequency, locale),
            session_mode=event.session_mode,
            session_mode_label=session_mode_label(event.session_mode, locale),
            start_date=event.start_date,
            continuity_status=continuity_status(event, now, self.tz),
            continuity_text=continuity_text(event, now, locale, self.tz),
        )
