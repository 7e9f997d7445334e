"""Testimonial Models"""

from datetime import datetime

from sqlalchemy import DateTime, Float, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from academy.modules.shared import BaseModel


class GoogleReview(BaseModel):
    """
    One cached review from the Google Places API.

    The table holds a single snapshot; every sync replaces all rows.
    """

    __tablename__ = "google_reviews"

    author_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    author_uri: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    author_photo_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    rating: Mapped[float | None] = mapped_column(Float, nullable=True)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    relative_time: Mapped[str | None] = mapped_column(String(100), nullable=True)
    published_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    synced_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def __repr__(self) -> str:
        return f"<GoogleReview(id={self.id}, author_name={self.author_name})>"
