"""Location Repository"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.modules.events.models import Event

from .models import Location


async def create(db: AsyncSession, **fields) -> Location:
    location = Location(**fields)
    db.add(location)
    await db.flush()
    await db.refresh(location)
    return location


async def get_by_id(db: AsyncSession, location_id: str) -> Location | None:
    return await db.get(Location, location_id)


async def list_all(db: AsyncSession, is_active: bool | None = None) -> list[Location]:
    """Locations, newest first."""
    query = select(Location)
    if is_active is not None:
        query = query.where(Location.is_active == is_active)
    result = await db.execute(query.order_by(Location.created_at.desc()))
    return list(result.scalars().all())


async def count_active_events(db: AsyncSession, location_id: str) -> int:
    count = await db.scalar(
        select(func.count())
        .select_from(Event)
        .where(Event.location_id == location_id, Event.is_active.is_(True))
    )
    return count or 0


async def update(db: AsyncSession, location: Location, **fields) -> Location:
    for name, value in fields.items():
        setattr(location, name, value)
    await db.flush()
    await db.refresh(location)
    return location
