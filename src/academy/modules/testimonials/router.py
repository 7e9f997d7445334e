"""
Testimonials Router

The cached reviews are public; an admin can force a refresh.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.auth import require_admin
from academy.core.database import get_db
from academy.modules.testimonials import service
from academy.modules.testimonials.schemas import GoogleReviewResponse, ReviewSyncResponse
from academy.modules.users.models import User

router = APIRouter()


@router.get("", response_model=list[GoogleReviewResponse])
async def list_testimonials(db: AsyncSession = Depends(get_db)) -> list[GoogleReviewResponse]:
    reviews = await service.get_cached_reviews(db)
    return [GoogleReviewResponse.model_validate(review) for review in reviews]


@router.post("/sync", response_model=ReviewSyncResponse)
async def sync_testimonials(_admin: User = Depends(require_admin)) -> ReviewSyncResponse:
    synced = await service.sync_google_reviews()
    return ReviewSyncResponse(message="Google reviews synced successfully.", synced=synced)
