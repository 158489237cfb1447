"""Dependency injection container for application components."""
import logging

import redis

from circles.config import Settings
from circles.dao import RedisEventDAO
from circles.db import RedisDocumentClient
from circles.handlers import EventHandler
from circles.services import EventService

logger = logging.getLogger(__name__)


class Container:
    """Dependency injection container.

    Initializes and wires up all application dependencies.
    """

    def __init__(self, settings: Settings):
        """Initialize container with all dependencies.

        Args:
            settings: Application settings
        """
        logger.info("[Container] Initializing container")
        self.settings = settings

        logger.info(f"[Container] Connecting to Redis at {settings.redis_address}")
        self.redis_internal_client = redis.Redis(
            host=settings.redis_host,
            port=settings.redis_port,
            password=settings.redis_password or None,
            db=settings.redis_db,
            decode_responses=True,
        )

        # Raises if Redis is unreachable
        self.redis_client = RedisDocumentClient(self.redis_internal_client)

        self.event_dao = RedisEventDAO(self.redis_client)
        self.event_service = EventService(self.event_dao, tz=settings.tz)
        self.event_handler = EventHandler(
            self.event_service, default_locale=settings.default_locale
        )

        logger.info("[Container] Container initialized")

    def shutdown(self) -> None:
        """Release the Redis connection pool."""
        logger.info("[Container] Closing Redis connection")
        self.redis_internal_client.close()
