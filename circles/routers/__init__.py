"""Routers package."""
from circles.routers.event_router import router as event_router, set_event_handler

__all__ = ["event_router", "set_event_handler"]
