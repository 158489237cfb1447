"""Database clients package."""
from circles.db.redis_client import RedisDocumentClient

__all__ = ["RedisDocumentClient"]
