"""
Event Repository

Events are always returned with their location and category loaded.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from .models import Event


def _with_relations():
    return select(Event).options(selectinload(Event.location), selectinload(Event.category))


async def get_by_id(db: AsyncSession, event_id: str) -> Event | None:
    result = await db.execute(
        _with_relations()
        .where(Event.id == event_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def create(db: AsyncSession, **fields) -> Event:
    event = Event(**fields)
    db.add(event)
    await db.flush()
    return await get_by_id(db, event.id)


async def list_filtered(
    db: AsyncSession,
    *,
    is_active: bool | None = None,
    can_enroll: bool | None = None,
    location_id: str | None = None,
    category_id: str | None = None,
) -> list[Event]:
    """Events matching every given filter, earliest start first."""
    query = _with_relations()
    if is_active is not None:
        query = query.where(Event.is_active == is_active)
    if can_enroll is not None:
        query = query.where(Event.can_enroll == can_enroll)
    if location_id:
        query = query.where(Event.location_id == location_id)
    if category_id:
        query = query.where(Event.category_id == category_id)

    result = await db.execute(query.order_by(Event.start_date.asc(), Event.start_time.asc()))
    return list(result.scalars().all())


async def update(db: AsyncSession, event: Event, **fields) -> Event:
    for name, value in fields.items():
        setattr(event, name, value)
    await db.flush()
    return await get_by_id(db, event.id)
