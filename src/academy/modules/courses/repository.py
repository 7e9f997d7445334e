"""Course Repository"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from academy.modules.classes.models import CourseClass

from .models import Course


async def create(db: AsyncSession, **fields) -> Course:
    course = Course(**fields)
    db.add(course)
    await db.flush()
    await db.refresh(course)
    return course


async def get_by_id(db: AsyncSession, course_id: str) -> Course | None:
    return await db.get(Course, course_id)


async def list_filtered(
    db: AsyncSession,
    *,
    title: str | None = None,
    category_id: str | None = None,
    is_active: bool | None = None,
    age_range: str | None = None,
) -> list[Course]:
    """Courses matching every given filter, oldest first. ``title`` matches substrings."""
    query = select(Course)
    if title:
        query = query.where(Course.title.ilike(f"%{title}%"))
    if category_id:
        query = query.where(Course.category_id == category_id)
    if is_active is not None:
        query = query.where(Course.is_active == is_active)
    if age_range:
        query = query.where(Course.age_range == age_range)

    result = await db.execute(query.order_by(Course.created_at.asc()))
    return list(result.scalars().all())


async def update(db: AsyncSession, course: Course, **fields) -> Course:
    for name, value in fields.items():
        setattr(course, name, value)
    await db.flush()
    await db.refresh(course)
    return course


async def delete(db: AsyncSession, course: Course) -> None:
    await db.delete(course)
    await db.flush()


async def count_classes(db: AsyncSession, course_id: str) -> int:
    result = await db.execute(
        select(func.count()).select_from(CourseClass).where(CourseClass.course_id == course_id)
    )
    return result.scalar_one()
