"""
Course Category Service

Category names are unique ignoring case. A category cannot be deleted while
courses or events still use it; deactivate it instead.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.exceptions import BadRequestError, ConflictError, NotFoundError
from academy.core.validation import validate_non_blank_fields, validate_required_fields
from academy.modules.categories import repository
from academy.modules.categories.models import CourseCategory
from academy.modules.categories.schemas import CategoryPayload
from academy.modules.users.models import User

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name",)


class CategoryNotFoundError(NotFoundError):
    def __init__(self, category_id: str):
        super().__init__(f"Category {category_id} not found.", error_code="CATEGORY_NOT_FOUND")


class DuplicateCategoryError(ConflictError):
    def __init__(self, name: str):
        super().__init__(f"Category name '{name}' already exists.", error_code="DUPLICATE_CATEGORY")


class CategoryInUseError(ConflictError):
    def __init__(self, courses: int, events: int):
        super().__init__(
            f"Category is used by {courses} course(s) and {events} event(s) and cannot be deleted.",
            error_code="CATEGORY_IN_USE",
        )


class InactiveCategoryError(BadRequestError):
    def __init__(self):
        super().__init__("Category is inactive.", error_code="CATEGORY_INACTIVE")


async def _ensure_unique_name(db: AsyncSession, name: str, exclude_id: str | None = None) -> None:
    if await repository.get_by_name(db, name, exclude_id=exclude_id) is not None:
        logger.warning(f"Duplicate category name rejected: {name}")
        raise DuplicateCategoryError(name)


async def get_category(db: AsyncSession, category_id: str) -> CourseCategory:
    category = await repository.get_by_id(db, category_id)
    if category is None:
        raise CategoryNotFoundError(category_id)
    return category


async def get_active_category(db: AsyncSession, category_id: str) -> CourseCategory:
    """Referenced-category check for courses and events."""
    category = await get_category(db, category_id)
    if not category.is_active:
        raise InactiveCategoryError()
    return category


async def create_category(
    db: AsyncSession,
    payload: CategoryPayload,
    acting_user: User,
) -> CourseCategory:
    validate_required_fields(payload.wire_dict(), REQUIRED_FIELDS)
    name = payload.name.strip()
    await _ensure_unique_name(db, name)

    category = await repository.create(
        db,
        name=name,
        description=payload.description,
        is_active=payload.is_active if payload.is_active is not None else True,
        created_by=acting_user.id,
        updated_by=acting_user.id,
    )
    logger.info(f"Category created: {category.name} ({category.id})")
    return category


async def list_categories(db: AsyncSession, is_active: bool | None = None) -> list[CourseCategory]:
    return await repository.list_all(db, is_active=is_active)


async def update_category(
    db: AsyncSession,
    category_id: str,
    payload: CategoryPayload,
    acting_user: User,
) -> CourseCategory:
    category = await get_category(db, category_id)
    validate_non_blank_fields(payload.sent_wire_dict(), REQUIRED_FIELDS)

    changes = payload.changes()
    if "name" in changes:
        changes["name"] = changes["name"].strip()
        await _ensure_unique_name(db, changes["name"], exclude_id=category.id)
    if changes.get("is_active") is None:
        changes.pop("is_active", None)

    category = await repository.update(db, category, **changes, updated_by=acting_user.id)
    logger.info(f"Category updated: {category.name} ({category.id})")
    return category


async def delete_category(db: AsyncSession, category_id: str) -> None:
    category = await get_category(db, category_id)

    courses, events = await repository.count_references(db, category.id)
    if courses or events:
        raise CategoryInUseError(courses, events)

    await repository.delete(db, category)
    logger.info(f"Category deleted: {category.name} ({category_id})")
