"""Locations module - venues and their rooms."""

from academy.modules.locations.models import Location

__all__ = ["Location"]
