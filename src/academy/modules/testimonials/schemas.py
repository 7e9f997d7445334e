"""Testimonial Schemas"""

from datetime import datetime

from academy.modules.shared import CamelModel


class GoogleReviewResponse(CamelModel):
    id: str
    author_name: str | None = None
    author_uri: str | None = None
    author_photo_url: str | None = None
    rating: float | None = None
    text: str
    relative_time: str | None = None
    published_at: datetime | None = None
    synced_at: datetime


class ReviewSyncResponse(CamelModel):
    message: str
    synced: int
