"""Testimonials module - cached Google Places reviews."""

from academy.modules.testimonials.models import GoogleReview

__all__ = ["GoogleReview"]
