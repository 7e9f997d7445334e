"""
Tests for the Google review cache.

The Places API is replaced by an httpx.MockTransport; the database session
used by the sync is a mock so the replace-in-one-transaction flow can be
asserted directly.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from academy.core.config import settings
from academy.core.scheduler import _job_registry, list_registered_jobs, trigger_job_manually
from academy.modules.testimonials import service
from academy.modules.testimonials.jobs import JOB_ID_SYNC_REVIEWS, register_testimonial_jobs
from academy.modules.testimonials.models import GoogleReview
from academy.modules.testimonials.service import (
    ReviewSyncError,
    extract_reviews,
    fetch_place_details,
    sync_google_reviews,
)

PLACE = {
    "displayName": {"text": "Academy"},
    "rating": 4.8,
    "reviews": [
        {
            "rating": 4,
            "text": {"text": "Good classes."},
            "relativePublishTimeDescription": "a month ago",
            "publishTime": "2026-09-01T08:00:00Z",
            "authorAttribution": {"displayName": "Sam", "uri": "https://maps/sam"},
        },
        {
            "rating": 5,
            "text": {"text": "  "},
            "publishTime": "2026-10-10T08:00:00Z",
            "authorAttribution": {"displayName": "Blank"},
        },
        {
            "rating": 5,
            "text": {"text": "Our kids love it!"},
            "relativePublishTimeDescription": "a week ago",
            "publishTime": "2026-10-05T12:30:00Z",
            "authorAttribution": {
                "displayName": "Alex",
                "photoUri": "https://photos/alex.png",
            },
        },
    ],
}


@pytest.fixture
def places_config():
    with (
        patch.object(settings, "google_api_key", "test-key"),
        patch.object(settings, "google_place_id", "place-123"),
        patch.object(settings, "review_sync_max_attempts", 3),
        patch.object(settings, "review_sync_retry_delay_seconds", 0),
    ):
        yield


def _serve(*responses: httpx.Response):
    """Patch the service's AsyncClient to answer with ``responses`` in order."""
    queue = list(responses)
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return queue.pop(0)

    transport = httpx.MockTransport(handler)
    real_client = httpx.AsyncClient
    patcher = patch.object(
        service.httpx,
        "AsyncClient",
        lambda **kwargs: real_client(transport=transport, **kwargs),
    )
    return patcher, requests


class TestExtractReviews:
    def test_drops_empty_text_and_sorts_newest_first(self):
        synced_at = datetime(2026, 10, 17, tzinfo=UTC)

        reviews = extract_reviews(PLACE, synced_at)

        assert [review.author_name for review in reviews] == ["Alex", "Sam"]
        assert reviews[0].author_photo_url == "https://photos/alex.png"
        assert reviews[0].published_at == datetime(2026, 10, 5, 12, 30, tzinfo=UTC)
        assert reviews[1].author_uri == "https://maps/sam"
        assert all(review.synced_at == synced_at for review in reviews)

    def test_undated_reviews_go_last(self):
        place = {
            "reviews": [
                {"text": {"text": "No date"}, "rating": 3},
                {"text": {"text": "Dated"}, "rating": 5, "publishTime": "2026-01-01T00:00:00Z"},
            ]
        }

        reviews = extract_reviews(place, datetime.now(UTC))

        assert [review.text for review in reviews] == ["Dated", "No date"]

    def test_place_without_reviews(self):
        assert extract_reviews({"displayName": {"text": "Academy"}}, datetime.now(UTC)) == []


class TestFetchPlaceDetails:
    @pytest.mark.asyncio
    async def test_not_configured(self):
        with patch.object(settings, "google_api_key", ""):
            with pytest.raises(ReviewSyncError) as exc_info:
                await fetch_place_details()

        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_sends_key_and_field_mask(self, places_config):
        patcher, requests = _serve(httpx.Response(200, json=PLACE))

        with patcher:
            place = await fetch_place_details()

        assert place["rating"] == 4.8
        assert requests[0].url.path.endswith("/place-123")
        assert requests[0].url.params["fields"] == "displayName,rating,reviews"
        assert requests[0].headers["X-Goog-Api-Key"] == "test-key"

    @pytest.mark.asyncio
    async def test_retries_server_errors(self, places_config):
        patcher, requests = _serve(
            httpx.Response(503),
            httpx.Response(500),
            httpx.Response(200, json=PLACE),
        )

        with patcher:
            place = await fetch_place_details()

        assert len(requests) == 3
        assert len(place["reviews"]) == 3

    @pytest.mark.asyncio
    async def test_client_error_fails_immediately(self, places_config):
        patcher, requests = _serve(httpx.Response(403, json={"error": "denied"}))

        with patcher:
            with pytest.raises(ReviewSyncError):
                await fetch_place_details()

        assert len(requests) == 1

    @pytest.mark.asyncio
    async def test_gives_up_after_max_attempts(self, places_config):
        patcher, requests = _serve(*(httpx.Response(502) for _ in range(3)))

        with patcher:
            with pytest.raises(ReviewSyncError):
                await fetch_place_details()

        assert len(requests) == 3


def _session_maker():
    session = MagicMock()
    session.execute = AsyncMock()
    session.begin.return_value.__aenter__.return_value = session
    maker = MagicMock()
    maker.return_value.__aenter__.return_value = session
    return maker, session


@pytest.mark.asyncio
async def test_sync_replaces_cached_reviews():
    maker, session = _session_maker()

    with (
        patch.object(service, "fetch_place_details", AsyncMock(return_value=PLACE)),
        patch.object(service, "async_session_maker", maker),
    ):
        synced = await sync_google_reviews()

    assert synced == 2
    session.begin.assert_called_once()
    session.execute.assert_awaited_once()
    added = session.add_all.call_args.args[0]
    assert all(isinstance(review, GoogleReview) for review in added)
    assert [review.author_name for review in added] == ["Alex", "Sam"]


@pytest.mark.asyncio
async def test_failed_fetch_keeps_existing_snapshot():
    maker, session = _session_maker()

    with (
        patch.object(service, "fetch_place_details", AsyncMock(side_effect=ReviewSyncError())),
        patch.object(service, "async_session_maker", maker),
    ):
        with pytest.raises(ReviewSyncError):
            await sync_google_reviews()

    maker.assert_not_called()


class TestReviewSyncJob:
    @pytest.fixture(autouse=True)
    def _isolated_registry(self):
        saved = dict(_job_registry)
        _job_registry.clear()
        yield
        _job_registry.clear()
        _job_registry.update(saved)

    def test_registers_daily_cron(self):
        with (
            patch.object(settings, "review_sync_hour", 0),
            patch.object(settings, "review_sync_minute", 0),
            patch.object(settings, "review_sync_timezone", "Asia/Kolkata"),
        ):
            register_testimonial_jobs()

        jobs = list_registered_jobs()
        assert [job["job_id"] for job in jobs] == [JOB_ID_SYNC_REVIEWS]
        assert "hour='0'" in jobs[0]["trigger"]
        assert "minute='0'" in jobs[0]["trigger"]

    @pytest.mark.asyncio
    async def test_manual_trigger_runs_sync(self):
        register_testimonial_jobs()

        with patch(
            "academy.modules.testimonials.jobs.sync_google_reviews",
            AsyncMock(return_value=4),
        ):
            result = await trigger_job_manually(JOB_ID_SYNC_REVIEWS)

        assert result["status"] == "success"
        assert result["result"] == 4

    @pytest.mark.asyncio
    async def test_manual_trigger_reports_failure(self):
        register_testimonial_jobs()

        with patch(
            "academy.modules.testimonials.jobs.sync_google_reviews",
            AsyncMock(side_effect=ReviewSyncError()),
        ):
            result = await trigger_job_manually(JOB_ID_SYNC_REVIEWS)

        assert result["status"] == "error"

    @pytest.mark.asyncio
    async def test_unknown_job(self):
        with pytest.raises(KeyError):
            await trigger_job_manually("missing")
