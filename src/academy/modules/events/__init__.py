"""Events module - one-off events held at a location."""

from academy.modules.events.models import Event

__all__ = ["Event"]
