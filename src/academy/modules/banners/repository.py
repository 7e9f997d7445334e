"""Banner Repository"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Banner


async def create(db: AsyncSession, **fields) -> Banner:
    banner = Banner(**fields)
    db.add(banner)
    await db.flush()
    await db.refresh(banner)
    return banner


async def get_by_id(db: AsyncSession, banner_id: str) -> Banner | None:
    return await db.get(Banner, banner_id)


async def list_all(db: AsyncSession) -> list[Banner]:
    """All banners in display order."""
    result = await db.execute(select(Banner).order_by(Banner.order.asc(), Banner.created_at.asc()))
    return list(result.scalars().all())


async def update(db: AsyncSession, banner: Banner, **fields) -> Banner:
    for name, value in fields.items():
        setattr(banner, name, value)
    await db.flush()
    await db.refresh(banner)
    return banner


async def delete(db: AsyncSession, banner: Banner) -> None:
    await db.delete(banner)
    await db.flush()
