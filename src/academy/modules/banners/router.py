"""
Banners Router

Reads are public; writes require an admin. Create and update accept JSON
or a multipart form with the image/video under the ``banner`` field.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.auth import require_admin
from academy.core.database import get_db
from academy.modules.banners import service
from academy.modules.banners.schemas import BannerDeleteResponse, BannerPayload, BannerResponse
from academy.modules.shared.media import media_payload
from academy.modules.users.models import User

router = APIRouter()

MEDIA_FIELD = "banner"
MEDIA_FOLDER = "banners"


@router.post("", response_model=BannerResponse, status_code=status.HTTP_201_CREATED)
async def create_banner(
    request: Request,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> BannerResponse:
    async with media_payload(
        request, BannerPayload, file_field=MEDIA_FIELD, folder=MEDIA_FOLDER
    ) as payload:
        banner = await service.create_banner(db, payload, admin)
    return BannerResponse.model_validate(banner)


@router.get("", response_model=list[BannerResponse])
async def list_banners(db: AsyncSession = Depends(get_db)) -> list[BannerResponse]:
    banners = await service.list_banners(db)
    return [BannerResponse.model_validate(banner) for banner in banners]


@router.get("/{banner_id}", response_model=BannerResponse)
async def get_banner(banner_id: UUID, db: AsyncSession = Depends(get_db)) -> BannerResponse:
    banner = await service.get_banner(db, str(banner_id))
    return BannerResponse.model_validate(banner)


@router.put("/{banner_id}", response_model=BannerResponse)
async def update_banner(
    banner_id: UUID,
    request: Request,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> BannerResponse:
    async with media_payload(
        request, BannerPayload, file_field=MEDIA_FIELD, folder=MEDIA_FOLDER
    ) as payload:
        banner = await service.update_banner(db, str(banner_id), payload, admin)
    return BannerResponse.model_validate(banner)


@router.delete("/{banner_id}", response_model=BannerDeleteResponse)
async def delete_banner(
    banner_id: UUID,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> BannerDeleteResponse:
    await service.delete_banner(db, str(banner_id), admin)
    return BannerDeleteResponse()
