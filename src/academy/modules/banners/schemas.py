"""Banner Schemas"""

from datetime import datetime

from academy.modules.shared import CamelModel


class BannerPayload(CamelModel):
    """Create/update body; required fields are checked by the service."""

    title: str | None = None
    subtitle: str | None = None
    media_url: str | None = None
    media_type: str | None = None
    button1_text: str | None = None
    button1_link: str | None = None
    button2_text: str | None = None
    button2_link: str | None = None
    order: int | None = None


class BannerResponse(CamelModel):
    id: str
    title: str
    subtitle: str | None = None
    media_url: str
    media_type: str
    button1_text: str | None = None
    button1_link: str | None = None
    button2_text: str | None = None
    button2_link: str | None = None
    order: int
    created_by: str | None = None
    updated_by: str | None = None
    created_at: datetime
    updated_at: datetime


class BannerDeleteResponse(CamelModel):
    message: str = "Banner deleted successfully."
