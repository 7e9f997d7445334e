"""
Events Router

All routes require authentication; writes require an admin. Create and
update accept JSON or a multipart form with the media file under the
``media`` field. Events are deactivated, never deleted.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.auth import get_current_user, require_admin
from academy.core.database import get_db
from academy.modules.events import service
from academy.modules.events.schemas import EventPayload, EventResponse
from academy.modules.shared.media import media_payload
from academy.modules.users.models import User

router = APIRouter()

MEDIA_FIELD = "media"
MEDIA_FOLDER = "events"


@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(
    request: Request,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> EventResponse:
    async with media_payload(
        request, EventPayload, file_field=MEDIA_FIELD, folder=MEDIA_FOLDER
    ) as payload:
        event = await service.create_event(db, payload, admin)
    return EventResponse.model_validate(event)


@router.get("", response_model=list[EventResponse])
async def list_events(
    is_active: bool | None = Query(None, alias="isActive"),
    can_enroll: bool | None = Query(None, alias="canEnroll"),
    location_id: UUID | None = Query(None, alias="locationId"),
    category_id: UUID | None = Query(None, alias="categoryId"),
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> list[EventResponse]:
    events = await service.list_events(
        db,
        is_active=is_active,
        can_enroll=can_enroll,
        location_id=str(location_id) if location_id else None,
        category_id=str(category_id) if category_id else None,
    )
    return [EventResponse.model_validate(event) for event in events]


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(
    event_id: UUID,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> EventResponse:
    event = await service.get_event(db, str(event_id))
    return EventResponse.model_validate(event)


@router.put("/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: UUID,
    request: Request,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> EventResponse:
    async with media_payload(
        request, EventPayload, file_field=MEDIA_FIELD, folder=MEDIA_FOLDER
    ) as payload:
        event = await service.update_event(db, str(event_id), payload, admin)
    return EventResponse.model_validate(event)


@router.patch("/{event_id}/deactivate", response_model=EventResponse)
async def deactivate_event(
    event_id: UUID,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> EventResponse:
    event = await service.deactivate_event(db, str(event_id), admin)
    return EventResponse.model_validate(event)
