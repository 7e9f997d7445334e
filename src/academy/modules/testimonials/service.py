"""
Testimonial Service

Keeps a local snapshot of the place's Google reviews. ``sync_google_reviews``
fetches the Places API, keeps reviews with text, newest first, and swaps the
snapshot in one transaction. Readers only ever see the cached table.
"""

import asyncio
import logging
from datetime import UTC, datetime
from typing import Any

import httpx
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.config import settings
from academy.core.database import async_session_maker
from academy.core.exceptions import ServiceUnavailableError
from academy.modules.testimonials.models import GoogleReview

logger = logging.getLogger(__name__)

PLACE_FIELDS = "displayName,rating,reviews"
REQUEST_TIMEOUT_SECONDS = 10.0


class ReviewSyncError(ServiceUnavailableError):
    def __init__(self, message: str = "Unable to fetch Google place details."):
        super().__init__(message, error_code="REVIEW_SYNC_FAILED")


async def fetch_place_details() -> dict[str, Any]:
    """
    GET the configured place from the Places API.

    Transport errors and 5xx responses are retried up to
    ``review_sync_max_attempts`` times, ``review_sync_retry_delay_seconds``
    apart. Any other non-2xx response fails immediately.

    Raises:
        ReviewSyncError: Not configured, rejected, or out of attempts
    """
    if not settings.google_api_key or not settings.google_place_id:
        raise ReviewSyncError("Google review sync is not configured.")

    url = f"{settings.google_places_base_url}/{settings.google_place_id}"
    headers = {"X-Goog-Api-Key": settings.google_api_key}
    params = {"fields": PLACE_FIELDS}
    max_attempts = max(1, settings.review_sync_max_attempts)

    async with httpx.AsyncClient(timeout=REQUEST_TIMEOUT_SECONDS) as client:
        for attempt in range(1, max_attempts + 1):
            try:
                response = await client.get(url, params=params, headers=headers)
            except httpx.TransportError as e:
                logger.warning(f"Places API request failed (attempt {attempt}/{max_attempts}): {e}")
            else:
                if response.status_code < 500:
                    if response.is_error:
                        logger.error(
                            f"Places API rejected the request: "
                            f"{response.status_code} {response.text[:200]}"
                        )
                        raise ReviewSyncError()
                    return response.json()
                logger.warning(
                    f"Places API returned {response.status_code} "
                    f"(attempt {attempt}/{max_attempts})"
                )

            if attempt < max_attempts:
                await asyncio.sleep(settings.review_sync_retry_delay_seconds)

    raise ReviewSyncError()


def _parse_publish_time(value: str | None) -> datetime | None:
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.warning(f"Unparseable review publishTime: {value!r}")
        return None


def extract_reviews(place: dict[str, Any], synced_at: datetime) -> list[GoogleReview]:
    """Reviews with non-empty text, newest first (undated ones last)."""
    reviews = []
    for raw in place.get("reviews") or []:
        text = ((raw.get("text") or {}).get("text") or "").strip()
        if not text:
            continue
        author = raw.get("authorAttribution") or {}
        reviews.append(
            GoogleReview(
                author_name=author.get("displayName"),
                author_uri=author.get("uri"),
                author_photo_url=author.get("photoUri"),
                rating=raw.get("rating"),
                text=text,
                relative_time=raw.get("relativePublishTimeDescription"),
                published_at=_parse_publish_time(raw.get("publishTime")),
                synced_at=synced_at,
            )
        )

    reviews.sort(
        key=lambda review: review.published_at or datetime.min.replace(tzinfo=UTC),
        reverse=True,
    )
    return reviews


async def sync_google_reviews() -> int:
    """
    Replace the cached reviews with a fresh fetch.

    Runs in its own session so it can be called from the scheduler. The
    delete and inserts commit together; on failure the old snapshot stays.

    Returns:
        Number of reviews cached
    """
    place = await fetch_place_details()
    reviews = extract_reviews(place, synced_at=datetime.now(UTC))

    async with async_session_maker() as db:
        async with db.begin():
            await db.execute(delete(GoogleReview))
            db.add_all(reviews)

    logger.info(f"Google reviews synced: {len(reviews)} cached")
    return len(reviews)


async def get_cached_reviews(db: AsyncSession) -> list[GoogleReview]:
    result = await db.execute(
        select(GoogleReview).order_by(
            GoogleReview.published_at.desc().nulls_last(),
            GoogleReview.created_at.asc(),
        )
    )
    return list(result.scalars().all())
