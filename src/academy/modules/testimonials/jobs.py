"""
Testimonial Background Jobs

Daily refresh of the Google review cache, at ``review_sync_hour``:
``review_sync_minute`` in ``review_sync_timezone``.
"""

import logging

from apscheduler.triggers.cron import CronTrigger

from academy.core.config import settings
from academy.core.scheduler import register_job
from academy.modules.testimonials.service import sync_google_reviews

logger = logging.getLogger(__name__)

JOB_ID_SYNC_REVIEWS = "testimonials_sync_google_reviews"


async def run_review_sync() -> int:
    logger.info("Running daily Google review sync...")
    return await sync_google_reviews()


def register_testimonial_jobs() -> None:
    """Register the review sync job with the scheduler."""
    register_job(
        job_id=JOB_ID_SYNC_REVIEWS,
        func=run_review_sync,
        trigger=CronTrigger(
            hour=settings.review_sync_hour,
            minute=settings.review_sync_minute,
            timezone=settings.review_sync_timezone,
        ),
    )
    logger.info(
        f"Registered job: {JOB_ID_SYNC_REVIEWS} (daily at "
        f"{settings.review_sync_hour:02d}:{settings.review_sync_minute:02d} "
        f"{settings.review_sync_timezone})"
    )
