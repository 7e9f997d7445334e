"""Location Schemas"""

from datetime import datetime
from typing import Any

from academy.modules.shared import CamelModel


class LocationPayload(CamelModel):
    name: str | None = None
    address_line1: str | None = None
    address_line2: str | None = None
    suburb: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None
    postcode: str | None = None
    # Checked to be a list by the service, so a wrong shape gets a clear 400
    rooms: Any = None
    notes: str | None = None
    is_active: bool | None = None


class LocationResponse(CamelModel):
    id: str
    name: str
    address_line1: str
    address_line2: str | None = None
    suburb: str
    city: str
    state: str
    country: str
    postcode: str
    rooms: list[str]
    notes: str | None = None
    is_active: bool
    created_by: str | None = None
    updated_by: str | None = None
    created_at: datetime
    updated_at: datetime


class LocationSummary(CamelModel):
    """Embedded view used by events and classes."""

    id: str
    name: str
    address_line1: str
    city: str
    state: str
    postcode: str
