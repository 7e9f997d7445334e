"""Banners module - homepage banner slides."""

from academy.modules.banners.models import Banner

__all__ = ["Banner"]
