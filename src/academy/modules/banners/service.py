"""
Banner Service

Banners need a title and media; everything else is optional. ``order``
defaults to 0 and banners are listed by ascending order.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.exceptions import NotFoundError
from academy.core.validation import validate_non_blank_fields, validate_required_fields
from academy.modules.banners import repository
from academy.modules.banners.models import Banner
from academy.modules.banners.schemas import BannerPayload
from academy.modules.users.models import User

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "mediaUrl", "mediaType")


class BannerNotFoundError(NotFoundError):
    def __init__(self, banner_id: str):
        super().__init__(f"Banner {banner_id} not found.", error_code="BANNER_NOT_FOUND")


async def create_banner(db: AsyncSession, payload: BannerPayload, acting_user: User) -> Banner:
    validate_required_fields(payload.wire_dict(), REQUIRED_FIELDS)

    fields = payload.model_dump(exclude={"order"})
    banner = await repository.create(
        db,
        **fields,
        order=payload.order if payload.order is not None else 0,
        created_by=acting_user.id,
        updated_by=acting_user.id,
    )
    logger.info(f"Banner created: {banner.id} by {acting_user.account_id}")
    return banner


async def list_banners(db: AsyncSession) -> list[Banner]:
    return await repository.list_all(db)


async def get_banner(db: AsyncSession, banner_id: str) -> Banner:
    banner = await repository.get_by_id(db, banner_id)
    if banner is None:
        raise BannerNotFoundError(banner_id)
    return banner


async def update_banner(
    db: AsyncSession,
    banner_id: str,
    payload: BannerPayload,
    acting_user: User,
) -> Banner:
    banner = await get_banner(db, banner_id)
    validate_non_blank_fields(payload.sent_wire_dict(), REQUIRED_FIELDS)

    changes = payload.changes()
    if "order" in changes and changes["order"] is None:
        changes["order"] = 0

    banner = await repository.update(db, banner, **changes, updated_by=acting_user.id)
    logger.info(f"Banner updated: {banner.id} by {acting_user.account_id}")
    return banner


async def delete_banner(db: AsyncSession, banner_id: str, acting_user: User) -> None:
    banner = await get_banner(db, banner_id)
    await repository.delete(db, banner)
    logger.info(f"Banner deleted: {banner_id} by {acting_user.account_id}")
