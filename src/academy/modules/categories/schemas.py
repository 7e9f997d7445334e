"""Course Category Schemas"""

from datetime import datetime

from academy.modules.shared import CamelModel


class CategoryPayload(CamelModel):
    name: str | None = None
    description: str | None = None
    is_active: bool | None = None


class CategoryResponse(CamelModel):
    id: str
    name: str
    description: str | None = None
    is_active: bool
    created_by: str | None = None
    updated_by: str | None = None
    created_at: datetime
    updated_at: datetime


class CategorySummary(CamelModel):
    """Embedded view used by courses and events."""

    id: str
    name: str
    description: str | None = None


class CategoryDeleteResponse(CamelModel):
    message: str = "Category deleted successfully."
