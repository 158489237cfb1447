"""Circles taxonomy and event filtering service."""
