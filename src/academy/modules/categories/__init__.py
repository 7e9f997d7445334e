"""Categories module - course and event categories."""

from academy.modules.categories.models import CourseCategory

__all__ = ["CourseCategory"]
