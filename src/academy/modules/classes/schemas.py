"""Class Schemas"""

from datetime import date, datetime, time

from pydantic import field_serializer

from academy.core.validation import format_date, format_time
from academy.modules.shared import CamelModel, UUIDStr


class ClassPayload(CamelModel):
    """Create/update body. Dates are dd-MM-yyyy and times HH:mm."""

    course_id: UUIDStr | None = None
    location_id: UUIDStr | None = None
    tutor_id: UUIDStr | None = None
    term: str | None = None
    day: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    start_time: str | None = None
    end_time: str | None = None
    room: str | None = None
    notes: str | None = None
    available_seats: int | None = None
    is_active: bool | None = None


class ClassResponse(CamelModel):
    id: str
    course_id: str
    location_id: str
    tutor_id: str
    term: str
    day: str
    start_date: date
    end_date: date
    start_time: time
    end_time: time
    room: str
    notes: str | None = None
    available_seats: int
    is_active: bool
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


class ClassDeleteResponse(CamelModel):
    message: str = "Class deleted successfully."
