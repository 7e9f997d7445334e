"""
Location Service

Locations are never deleted. Deactivation is refused while the location
still hosts active events.
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.exceptions import BadRequestError, ConflictError, NotFoundError
from academy.core.validation import (
    validate_array_input,
    validate_non_blank_fields,
    validate_required_fields,
)
from academy.modules.locations import repository
from academy.modules.locations.models import Location
from academy.modules.locations.schemas import LocationPayload
from academy.modules.users.models import User

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "addressLine1", "suburb", "city", "state", "postcode")
DEFAULT_COUNTRY = "Australia"


class LocationNotFoundError(NotFoundError):
    def __init__(self, location_id: str):
        super().__init__(f"Location {location_id} not found.", error_code="LOCATION_NOT_FOUND")


class InactiveLocationError(BadRequestError):
    def __init__(self):
        super().__init__("Location is inactive.", error_code="LOCATION_INACTIVE")


class RoomNotFoundError(BadRequestError):
    def __init__(self, room: str):
        super().__init__(
            f'Room "{room}" does not exist in this location.',
            error_code="ROOM_NOT_FOUND",
        )


class LocationInUseError(ConflictError):
    def __init__(self, active_events: int):
        super().__init__(
            f"Location has {active_events} active event(s) and cannot be deactivated.",
            error_code="LOCATION_IN_USE",
        )


def normalize_rooms(rooms: Any) -> list[str]:
    """Require a list; trim names, drop blanks and repeats, keep order."""
    validate_array_input(rooms, 0, "Rooms must be an array.")
    cleaned: list[str] = []
    for room in rooms:
        name = str(room).strip()
        if name and name not in cleaned:
            cleaned.append(name)
    return cleaned


def ensure_room(location: Location, room: str) -> None:
    if not location.has_room(room):
        raise RoomNotFoundError(room)


async def get_location(db: AsyncSession, location_id: str) -> Location:
    location = await repository.get_by_id(db, location_id)
    if location is None:
        raise LocationNotFoundError(location_id)
    return location


async def get_active_location(db: AsyncSession, location_id: str) -> Location:
    """Referenced-location check for classes and events."""
    location = await get_location(db, location_id)
    if not location.is_active:
        raise InactiveLocationError()
    return location


async def create_location(
    db: AsyncSession,
    payload: LocationPayload,
    acting_user: User,
) -> Location:
    validate_required_fields(payload.wire_dict(), REQUIRED_FIELDS)
    rooms = normalize_rooms(payload.rooms) if payload.rooms is not None else []

    fields = payload.model_dump(exclude={"rooms", "country", "is_active"})
    location = await repository.create(
        db,
        **fields,
        rooms=rooms,
        country=(payload.country or "").strip() or DEFAULT_COUNTRY,
        is_active=payload.is_active if payload.is_active is not None else True,
        created_by=acting_user.id,
        updated_by=acting_user.id,
    )
    logger.info(f"Location created: {location.name} ({location.id})")
    return location


async def list_locations(db: AsyncSession, is_active: bool | None = None) -> list[Location]:
    return await repository.list_all(db, is_active=is_active)


async def update_location(
    db: AsyncSession,
    location_id: str,
    payload: LocationPayload,
    acting_user: User,
) -> Location:
    location = await get_location(db, location_id)
    validate_non_blank_fields(payload.sent_wire_dict(), REQUIRED_FIELDS)

    changes = payload.changes()
    if "rooms" in changes:
        changes["rooms"] = normalize_rooms(changes["rooms"])
    if "country" in changes:
        changes["country"] = (changes["country"] or "").strip() or DEFAULT_COUNTRY
    if "is_active" in changes:
        # Same active-event rule as deactivate_location
        if changes["is_active"] is False and location.is_active:
            await _ensure_no_active_events(db, location)
        if changes["is_active"] is None:
            changes.pop("is_active")

    location = await repository.update(db, location, **changes, updated_by=acting_user.id)
    logger.info(f"Location updated: {location.name} ({location.id})")
    return location


async def _ensure_no_active_events(db: AsyncSession, location: Location) -> None:
    active_events = await repository.count_active_events(db, location.id)
    if active_events:
        logger.warning(
            f"Deactivation of location {location.id} refused: {active_events} active event(s)"
        )
        raise LocationInUseError(active_events)


async def deactivate_location(db: AsyncSession, location_id: str, acting_user: User) -> Location:
    """
    Mark a location inactive, keeping the record and its history.

    Raises:
        LocationNotFoundError 404: Unknown id
        LocationInUseError 409: The location still has active events
    """
    location = await get_location(db, location_id)
    await _ensure_no_active_events(db, location)

    location = await repository.update(
        db, location, is_active=False, updated_by=acting_user.id
    )
    logger.info(f"Location deactivated: {location.name} ({location.id})")
    return location
