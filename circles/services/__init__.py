"""Services package."""
from circles.services.event_service import EventService

__all__ = ["EventService"]
