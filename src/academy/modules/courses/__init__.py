"""Courses module."""

from academy.modules.courses.models import Course

__all__ = ["Course"]
