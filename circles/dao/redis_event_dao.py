"""Redis-based Data Access Object for event documents."""
import json
import logging
from typing import Optional

import redis
from pydantic import ValidationError

from circles.db.redis_client import RedisDocumentClient
from circles.metrics import EVENTS_DECODE_ERRORS_TOTAL
from circles.models.event import Event

logger = logging.getLogger(__name__)

EVENT_DOC_KEY_FORMAT = "event_doc_v1:{}"
EVENT_DOC_KEY_PREFIX = "event_doc_v1:"


class RedisEventDAO:
    """Reads and writes raw event documents.

    Documents keep whatever shape the writer stored (legacy category
    strings, bare-string vibes, ...). Only the Event model interprets them.
    """

    def __init__(self, client: RedisDocumentClient):
        """Initialize RedisEventDAO.

        Args:
            client: RedisDocumentClient instance
        """
        self.client = client

    def upsert_event(self, event_id: str, document: dict) -> None:
        """Store a raw event document under its id."""
        key = EVENT_DOC_KEY_FORMAT.format(event_id)
        self.client.set(key, json.dumps({**document, "id": event_id}, default=str))

    def get_event(self, event_id: str) -> Optional[Event]:
        """Retrieve an event by id.

        Returns:
            Event, or None if missing or undecodable
        """
        key = EVENT_DOC_KEY_FORMAT.format(event_id)
        try:
            json_str = self.client.get(key)
        except redis.RedisError as e:
            logger.error(f"[RedisEventDAO] Failed to read event {event_id}: {e}")
            return None

        if json_str is None:
            return None
        return self._decode(event_id, json_str)

    def delete_event(self, event_id: str) -> bool:
        """Delete an event document. Returns False if it did not exist."""
        key = EVENT_DOC_KEY_FORMAT.format(event_id)
        removed = self.client.del_(key)
        if not removed:
            logger.warning(f"[RedisEventDAO] Event {event_id} not found, nothing to delete")
            return False
        logger.info(f"[RedisEventDAO] Deleted event {event_id}")
        return True

    def list_all_event_ids(self) -> list[str]:
        keys = self.client.keys(f"{EVENT_DOC_KEY_PREFIX}*")
        return [key[len(EVENT_DOC_KEY_PREFIX):] for key in keys]

    def list_events(self) -> list[Event]:
        """Load every stored event, skipping documents that fail to decode.

        Events are returned sorted by id so listings are reproducible.
        """
        try:
            event_ids = sorted(self.list_all_event_ids())
            keys = [EVENT_DOC_KEY_FORMAT.format(event_id) for event_id in event_ids]
            documents = self.client.mget(keys)
        except redis.RedisError as e:
            logger.error(f"[RedisEventDAO] Failed to load events: {e}")
            return []

        events = []
        for event_id, json_str in zip(event_ids, documents):
            if json_str is None:
                # Deleted between KEYS and MGET
                continue
            event = self._decode(event_id, json_str)
            if event is not None:
                events.append(event)

        logger.info(f"[RedisEventDAO] Loaded {len(events)} of {len(event_ids)} events")
        return events

    def _decode(self, event_id: str, json_str: str) -> Optional[Event]:
        try:
            document = json.loads(json_str)
            if not isinstance(document, dict):
                raise ValueError("document is not an object")
            document.setdefault("id", event_id)
            return Event.model_validate(document)
        except (ValueError, ValidationError) as e:
            EVENTS_DECODE_ERRORS_TOTAL.inc()
            logger.error(f"[RedisEventDAO] Failed to decode event {event_id}: {e}")
            return None
