"""Thin Redis wrapper used as the event document store."""
import logging
from typing import Optional

import redis

logger = logging.getLogger(__name__)


class RedisDocumentClient:
    """Key/value access to JSON documents stored in Redis."""

    def __init__(self, client: redis.Redis):
        """Wrap an existing Redis client and verify connectivity.

        Args:
            client: redis.Redis created with decode_responses=True
        """
        self.client = client

        try:
            self.ping()
            logger.info("Connected to Redis")
        except redis.ConnectionError as e:
            logger.error(f"Could not connect to Redis: {e}")
            raise

    def set(self, key: str, value: str) -> None:
        self.client.set(key, value)

    def get(self, key: str) -> Optional[str]:
        """Get the value for a key, or None if it doesn't exist."""
        return self.client.get(key)

    def mget(self, keys: list[str]) -> list[Optional[str]]:
        """Get several values in one round trip, preserving key order."""
        if not keys:
            return []
        return self.client.mget(keys)

    def keys(self, pattern: str) -> list[str]:
        """Return all keys matching the given pattern (e.g. "prefix:*")."""
        return self.client.keys(pattern)

    def del_(self, key: str) -> int:
        """Delete a key. Returns the number of keys removed."""
        return self.client.delete(key)

    def ping(self) -> bool:
        """Check connectivity to Redis.

        Raises:
            redis.ConnectionError if connection fails
        """
        return self.client.ping()
