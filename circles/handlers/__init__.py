"""Handlers package."""
from circles.handlers.event_handler import EventHandler

__all__ = ["EventHandler"]
