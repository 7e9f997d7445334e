"""Class Repository"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import CourseClass


async def create(db: AsyncSession, **fields) -> CourseClass:
    course_class = CourseClass(**fields)
    db.add(course_class)
    await db.flush()
    await db.refresh(course_class)
    return course_class


async def get_by_id(db: AsyncSession, class_id: str) -> CourseClass | None:
    return await db.get(CourseClass, class_id)


async def list_filtered(
    db: AsyncSession,
    *,
    course_id: str | None = None,
    location_id: str | None = None,
    is_active: bool | None = None,
) -> list[CourseClass]:
    query = select(CourseClass)
    if course_id:
        query = query.where(CourseClass.course_id == course_id)
    if location_id:
        query = query.where(CourseClass.location_id == location_id)
    if is_active is not None:
        query = query.where(CourseClass.is_active == is_active)

    result = await db.execute(query.order_by(CourseClass.created_at.asc()))
    return list(result.scalars().all())


async def update(db: AsyncSession, course_class: CourseClass, **fields) -> CourseClass:
    for name, value in fields.items():
        setattr(course_class, name, value)
    await db.flush()
    await db.refresh(course_class)
    return course_class


async def delete(db: AsyncSession, course_class: CourseClass) -> None:
    await db.delete(course_class)
    await db.flush()
