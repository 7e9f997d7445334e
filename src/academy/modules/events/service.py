"""
Event Service

An event books a room at an active location under an active category.
Events are deactivated, never deleted.
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.exceptions import NotFoundError
from academy.core.validation import (
    ensure_date_range,
    ensure_non_negative,
    parse_date,
    parse_time,
    validate_non_blank_fields,
    validate_required_fields,
)
from academy.modules.categories.service import get_active_category
from academy.modules.events import repository
from academy.modules.events.models import DEFAULT_TIMEZONE, Event
from academy.modules.events.schemas import EventPayload
from academy.modules.locations.service import ensure_room, get_active_location
from academy.modules.users.models import User

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    "locationId",
    "categoryId",
    "title",
    "mediaUrl",
    "mediaType",
    "startDate",
    "endDate",
    "startTime",
    "endTime",
    "room",
    "availableSeats",
    "fees",
)


class EventNotFoundError(NotFoundError):
    def __init__(self, event_id: str):
        super().__init__(f"Event {event_id} not found.", error_code="EVENT_NOT_FOUND")


async def get_event(db: AsyncSession, event_id: str) -> Event:
    event = await repository.get_by_id(db, event_id)
    if event is None:
        raise EventNotFoundError(event_id)
    return event


async def create_event(db: AsyncSession, payload: EventPayload, acting_user: User) -> Event:
    validate_required_fields(payload.wire_dict(), REQUIRED_FIELDS)

    location = await get_active_location(db, payload.location_id)
    await get_active_category(db, payload.category_id)
    room = payload.room.strip()
    ensure_room(location, room)

    start_date = parse_date(payload.start_date, "startDate")
    end_date = parse_date(payload.end_date, "endDate")
    ensure_date_range(start_date, end_date)
    start_time = parse_time(payload.start_time, "startTime")
    end_time = parse_time(payload.end_time, "endTime")

    ensure_non_negative(payload.available_seats, "Available seats")
    ensure_non_negative(payload.fees, "Fees")

    event = await repository.create(
        db,
        location_id=location.id,
        category_id=payload.category_id,
        title=payload.title.strip(),
        description=payload.description or None,
        media_url=payload.media_url,
        media_type=payload.media_type,
        can_enroll=bool(payload.can_enroll),
        start_date=start_date,
        end_date=end_date,
        start_time=start_time,
        end_time=end_time,
        timezone=(payload.timezone or "").strip() or DEFAULT_TIMEZONE,
        room=room,
        notes=payload.notes or None,
        available_seats=payload.available_seats,
        fees=payload.fees,
        is_active=payload.is_active if payload.is_active is not None else True,
        created_by=acting_user.id,
        updated_by=acting_user.id,
    )
    logger.info(f"Event created: {event.title} ({event.id}) at {location.name}")
    return event


async def list_events(
    db: AsyncSession,
    *,
    is_active: bool | None = None,
    can_enroll: bool | None = None,
    location_id: str | None = None,
    category_id: str | None = None,
) -> list[Event]:
    return await repository.list_filtered(
        db,
        is_active=is_active,
        can_enroll=can_enroll,
        location_id=location_id,
        category_id=category_id,
    )


async def update_event(
    db: AsyncSession,
    event_id: str,
    payload: EventPayload,
    acting_user: User,
) -> Event:
    """
    Partial update.

    The room is re-checked against the target location (new or current)
    whenever either of them changes, and the final date range must hold.
    """
    event = await get_event(db, event_id)
    validate_non_blank_fields(payload.sent_wire_dict(), REQUIRED_FIELDS)

    changes: dict[str, Any] = payload.changes()

    location = event.location
    if "location_id" in changes and changes["location_id"] != event.location_id:
        location = await get_active_location(db, changes["location_id"])
    if "category_id" in changes and changes["category_id"] != event.category_id:
        await get_active_category(db, changes["category_id"])

    if "room" in changes:
        changes["room"] = changes["room"].strip()
    if "room" in changes or location is not event.location:
        ensure_room(location, changes.get("room", event.room))

    if "start_date" in changes:
        changes["start_date"] = parse_date(changes["start_date"], "startDate")
    if "end_date" in changes:
        changes["end_date"] = parse_date(changes["end_date"], "endDate")
    ensure_date_range(
        changes.get("start_date", event.start_date),
        changes.get("end_date", event.end_date),
    )

    if "start_time" in changes:
        changes["start_time"] = parse_time(changes["start_time"], "startTime")
    if "end_time" in changes:
        changes["end_time"] = parse_time(changes["end_time"], "endTime")

    ensure_non_negative(changes.get("available_seats"), "Available seats")
    ensure_non_negative(changes.get("fees"), "Fees")

    if "timezone" in changes:
        changes["timezone"] = (changes["timezone"] or "").strip() or DEFAULT_TIMEZONE
    for flag in ("can_enroll", "is_active"):
        if flag in changes and changes[flag] is None:
            changes.pop(flag)

    event = await repository.update(db, event, **changes, updated_by=acting_user.id)
    logger.info(f"Event updated: {event.title} ({event.id})")
    return event


async def deactivate_event(db: AsyncSession, event_id: str, acting_user: User) -> Event:
    event = await get_event(db, event_id)
    event = await repository.update(db, event, is_active=False, updated_by=acting_user.id)
    logger.info(f"Event deactivated: {event.title} ({event.id})")
    return event
