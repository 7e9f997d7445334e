"""Course Service"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.exceptions import ConflictError, NotFoundError
from academy.core.validation import validate_non_blank_fields, validate_required_fields
from academy.modules.categories.service import get_category
from academy.modules.courses import repository
from academy.modules.courses.models import Course
from academy.modules.courses.schemas import CoursePayload
from academy.modules.users.models import User

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "categoryId", "mediaUrl", "mediaType")


class CourseNotFoundError(NotFoundError):
    def __init__(self, course_id: str):
        super().__init__(f"Course {course_id} not found.", error_code="COURSE_NOT_FOUND")


class CourseInUseError(ConflictError):
    def __init__(self, title: str):
        super().__init__(
            f"Course '{title}' still has classes scheduled.",
            error_code="COURSE_IN_USE",
        )


async def get_course(db: AsyncSession, course_id: str) -> Course:
    course = await repository.get_by_id(db, course_id)
    if course is None:
        raise CourseNotFoundError(course_id)
    return course


async def create_course(db: AsyncSession, payload: CoursePayload, acting_user: User) -> Course:
    validate_required_fields(payload.wire_dict(), REQUIRED_FIELDS)
    await get_category(db, payload.category_id)

    fields = payload.model_dump(exclude={"is_active"})
    course = await repository.create(
        db,
        **fields,
        is_active=payload.is_active if payload.is_active is not None else True,
        created_by=acting_user.id,
        updated_by=acting_user.id,
    )
    logger.info(f"Course created: {course.title} ({course.id})")
    return course


async def list_courses(
    db: AsyncSession,
    *,
    title: str | None = None,
    category_id: str | None = None,
    is_active: bool | None = None,
    age_range: str | None = None,
) -> list[Course]:
    return await repository.list_filtered(
        db,
        title=title,
        category_id=category_id,
        is_active=is_active,
        age_range=age_range,
    )


async def update_course(
    db: AsyncSession,
    course_id: str,
    payload: CoursePayload,
    acting_user: User,
) -> Course:
    course = await get_course(db, course_id)
    validate_non_blank_fields(payload.sent_wire_dict(), REQUIRED_FIELDS)

    changes = payload.changes()
    if changes.get("category_id") and changes["category_id"] != course.category_id:
        await get_category(db, changes["category_id"])
    if changes.get("is_active") is None:
        changes.pop("is_active", None)

    course = await repository.update(db, course, **changes, updated_by=acting_user.id)
    logger.info(f"Course updated: {course.title} ({course.id})")
    return course


async def delete_course(db: AsyncSession, course_id: str) -> None:
    course = await get_course(db, course_id)
    if await repository.count_classes(db, course.id):
        raise CourseInUseError(course.title)
    await repository.delete(db, course)
    logger.info(f"Course deleted: {course.title} ({course_id})")
