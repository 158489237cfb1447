"""Data access objects package."""
from circles.dao.redis_event_dao import RedisEventDAO

__all__ = ["RedisEventDAO"]
