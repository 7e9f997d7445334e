"""
Class Service

A class runs a course in a room of an active location, taught by an
active staff account. Classes are hard-deleted.
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.exceptions import BadRequestError, NotFoundError
from academy.core.validation import (
    ensure_date_range,
    ensure_non_negative,
    parse_date,
    parse_time,
    validate_non_blank_fields,
    validate_required_fields,
)
from academy.modules.classes import repository
from academy.modules.classes.models import CourseClass
from academy.modules.classes.schemas import ClassPayload
from academy.modules.courses.service import get_course
from academy.modules.locations.service import ensure_room, get_active_location
from academy.modules.users.exceptions import UserNotFoundError
from academy.modules.users.models import User, UserRole
from academy.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    "courseId",
    "locationId",
    "tutorId",
    "term",
    "day",
    "startDate",
    "endDate",
    "startTime",
    "endTime",
    "room",
    "availableSeats",
)


class ClassNotFoundError(NotFoundError):
    def __init__(self, class_id: str):
        super().__init__(f"Class {class_id} not found.", error_code="CLASS_NOT_FOUND")


class InvalidTutorError(BadRequestError):
    def __init__(self):
        super().__init__(
            "Tutor must be an active staff account.",
            error_code="INVALID_TUTOR",
        )


async def get_active_tutor(db: AsyncSession, tutor_id: str) -> User:
    tutor = await UserRepository.get_by_id(db, tutor_id)
    if tutor is None:
        raise UserNotFoundError("Tutor")
    if tutor.role != UserRole.STAFF or not tutor.is_active:
        raise InvalidTutorError()
    return tutor


async def get_class(db: AsyncSession, class_id: str) -> CourseClass:
    course_class = await repository.get_by_id(db, class_id)
    if course_class is None:
        raise ClassNotFoundError(class_id)
    return course_class


async def create_class(db: AsyncSession, payload: ClassPayload, acting_user: User) -> CourseClass:
    validate_required_fields(payload.wire_dict(), REQUIRED_FIELDS)

    await get_course(db, payload.course_id)
    location = await get_active_location(db, payload.location_id)
    await get_active_tutor(db, payload.tutor_id)
    room = payload.room.strip()
    ensure_room(location, room)

    start_date = parse_date(payload.start_date, "startDate")
    end_date = parse_date(payload.end_date, "endDate")
    ensure_date_range(start_date, end_date)
    ensure_non_negative(payload.available_seats, "Available seats")

    course_class = await repository.create(
        db,
        course_id=payload.course_id,
        location_id=location.id,
        tutor_id=payload.tutor_id,
        term=payload.term.strip(),
        day=payload.day.strip(),
        start_date=start_date,
        end_date=end_date,
        start_time=parse_time(payload.start_time, "startTime"),
        end_time=parse_time(payload.end_time, "endTime"),
        room=room,
        notes=payload.notes or None,
        available_seats=payload.available_seats,
        is_active=payload.is_active if payload.is_active is not None else True,
        created_by=acting_user.id,
        updated_by=acting_user.id,
    )
    logger.info(f"Class created: {course_class.id} ({course_class.term}, {course_class.day})")
    return course_class


async def list_classes(
    db: AsyncSession,
    *,
    course_id: str | None = None,
    location_id: str | None = None,
    is_active: bool | None = None,
) -> list[CourseClass]:
    return await repository.list_filtered(
        db, course_id=course_id, location_id=location_id, is_active=is_active
    )


async def update_class(
    db: AsyncSession,
    class_id: str,
    payload: ClassPayload,
    acting_user: User,
) -> CourseClass:
    course_class = await get_class(db, class_id)
    validate_non_blank_fields(payload.sent_wire_dict(), REQUIRED_FIELDS)

    changes: dict[str, Any] = payload.changes()

    if "course_id" in changes and changes["course_id"] != course_class.course_id:
        await get_course(db, changes["course_id"])
    if "tutor_id" in changes and changes["tutor_id"] != course_class.tutor_id:
        await get_active_tutor(db, changes["tutor_id"])

    location_changed = (
        "location_id" in changes and changes["location_id"] != course_class.location_id
    )
    if "room" in changes:
        changes["room"] = changes["room"].strip()
    if location_changed or "room" in changes:
        location = await get_active_location(
            db, changes.get("location_id", course_class.location_id)
        )
        ensure_room(location, changes.get("room", course_class.room))

    for name in ("term", "day"):
        if name in changes:
            changes[name] = changes[name].strip()

    if "start_date" in changes:
        changes["start_date"] = parse_date(changes["start_date"], "startDate")
    if "end_date" in changes:
        changes["end_date"] = parse_date(changes["end_date"], "endDate")
    ensure_date_range(
        changes.get("start_date", course_class.start_date),
        changes.get("end_date", course_class.end_date),
    )

    if "start_time" in changes:
        changes["start_time"] = parse_time(changes["start_time"], "startTime")
    if "end_time" in changes:
        changes["end_time"] = parse_time(changes["end_time"], "endTime")

    ensure_non_negative(changes.get("available_seats"), "Available seats")
    if changes.get("is_active") is None:
        changes.pop("is_active", None)

    course_class = await repository.update(
        db, course_class, **changes, updated_by=acting_user.id
    )
    logger.info(f"Class updated: {course_class.id}")
    return course_class


async def delete_class(db: AsyncSession, class_id: str) -> None:
    course_class = await get_class(db, class_id)
    await repository.delete(db, course_class)
    logger.info(f"Class deleted: {class_id}")
