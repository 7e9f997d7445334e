"""Course Category Repository"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.modules.courses.models import Course
from academy.modules.events.models import Event

from .models import CourseCategory


async def create(db: AsyncSession, **fields) -> CourseCategory:
    category = CourseCategory(**fields)
    db.add(category)
    await db.flush()
    await db.refresh(category)
    return category


async def get_by_id(db: AsyncSession, category_id: str) -> CourseCategory | None:
    return await db.get(CourseCategory, category_id)


async def get_by_name(
    db: AsyncSession,
    name: str,
    exclude_id: str | None = None,
) -> CourseCategory | None:
    """Case-insensitive name lookup, optionally ignoring one category."""
    query = select(CourseCategory).where(func.lower(CourseCategory.name) == name.lower())
    if exclude_id:
        query = query.where(CourseCategory.id != exclude_id)
    result = await db.execute(query.limit(1))
    return result.scalar_one_or_none()


async def list_all(db: AsyncSession, is_active: bool | None = None) -> list[CourseCategory]:
    query = select(CourseCategory)
    if is_active is not None:
        query = query.where(CourseCategory.is_active == is_active)
    result = await db.execute(query.order_by(CourseCategory.created_at.asc()))
    return list(result.scalars().all())


async def count_references(db: AsyncSession, category_id: str) -> tuple[int, int]:
    """Number of (courses, events) pointing at a category."""
    courses = await db.scalar(
        select(func.count()).select_from(Course).where(Course.category_id == category_id)
    )
    events = await db.scalar(
        select(func.count()).select_from(Event).where(Event.category_id == category_id)
    )
    return courses or 0, events or 0


async def update(db: AsyncSession, category: CourseCategory, **fields) -> CourseCategory:
    for name, value in fields.items():
        setattr(category, name, value)
    await db.flush()
    await db.refresh(category)
    return category


async def delete(db: AsyncSession, category: CourseCategory) -> None:
    await db.delete(category)
    await db.flush()
