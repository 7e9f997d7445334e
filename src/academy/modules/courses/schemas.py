"""Course Schemas"""

from datetime import datetime

from academy.modules.shared import CamelModel, UUIDStr


class CoursePayload(CamelModel):
    title: str | None = None
    category_id: UUIDStr | None = None
    age_range: str | None = None
    media_url: str | None = None
    media_type: str | None = None
    description: str | None = None
    is_active: bool | None = None


class CourseResponse(CamelModel):
    id: str
    title: str
    category_id: str
    age_range: str | None = None
    media_url: str
    media_type: str
    description: str | None = None
    is_active: bool
    created_by: str | None = None
    updated_by: str | None = None
    created_at: datetime
    updated_at: datetime


class CourseDeleteResponse(CamelModel):
    message: str = "Course deleted successfully."
