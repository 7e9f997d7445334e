"""Classes module - scheduled runs of a course."""

from academy.modules.classes.models import CourseClass

__all__ = ["CourseClass"]
