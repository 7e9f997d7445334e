"""Event Schemas"""

from datetime import date, datetime, time
from decimal import Decimal

from pydantic import field_serializer

from academy.core.validation import format_date, format_time
from academy.modules.categories.schemas import CategorySummary
from academy.modules.locations.schemas import LocationSummary
from academy.modules.shared import CamelModel, UUIDStr


class EventPayload(CamelModel):
    """
    Create/update body.

    Dates are dd-MM-yyyy and times HH:mm. Multipart string values such as
    "true" or "12.50" are coerced to their field types.
    """

    location_id: UUIDStr | None = None
    category_id: UUIDStr | None = None
    title: str | None = None
    description: str | None = None
    media_url: str | None = None
    media_type: str | None = None
    can_enroll: bool | None = None
    start_date: str | None = None
    end_date: str | None = None
    start_time: str | None = None
    end_time: str | None = None
    timezone: str | None = None
    room: str | None = None
    notes: str | None = None
    available_seats: int | None = None
    fees: Decimal | None = None
    is_active: bool | None = None


class EventResponse(CamelModel):
    id: str
    location_id: str
    category_id: str
    title: str
    description: str | None = None
    media_url: str
    media_type: str
    can_enroll: bool
    start_date: date
    end_date: date
    start_time: time
    end_time: time
    timezone: str
    room: str
    notes: str | None = None
    available_seats: int
    fees: float
    is_active: bool
    location: LocationSummary | None = None
    category: CategorySummary | None = None
    created_by: str | None = None
    updated_by: str | None = None
    created_at: datetime
    updated_at: datetime

    @field_serializer("start_date", "end_date")
    def serialize_date(self, value: date) -> str:
        return format_date(value)

    @field_serializer("start_time", "end_time")
    def serialize_time(self, value: time) -> str:
        return format_time(value)
