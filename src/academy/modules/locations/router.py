"""
Locations Router

All routes require authentication; writes require an admin. Locations are
deactivated, never deleted.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.auth import get_current_user, require_admin
from academy.core.database import get_db
from academy.modules.locations import service
from academy.modules.locations.schemas import LocationPayload, LocationResponse
from academy.modules.users.models import User

router = APIRouter()


@router.post("", response_model=LocationResponse, status_code=status.HTTP_201_CREATED)
async def create_location(
    payload: LocationPayload,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> LocationResponse:
    location = await service.create_location(db, payload, admin)
    return LocationResponse.model_validate(location)


@router.get("", response_model=list[LocationResponse])
async def list_locations(
    is_active: bool | None = Query(None, alias="isActive"),
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> list[LocationResponse]:
    locations = await service.list_locations(db, is_active=is_active)
    return [LocationResponse.model_validate(location) for location in locations]


@router.get("/{location_id}", response_model=LocationResponse)
async def get_location(
    location_id: UUID,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> LocationResponse:
    location = await service.get_location(db, str(location_id))
    return LocationResponse.model_validate(location)


@router.put("/{location_id}", response_model=LocationResponse)
async def update_location(
    location_id: UUID,
    payload: LocationPayload,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> LocationResponse:
    location = await service.update_location(db, str(location_id), payload, admin)
    return LocationResponse.model_validate(location)


@router.patch("/{location_id}/deactivate", response_model=LocationResponse)
async def deactivate_location(
    location_id: UUID,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> LocationResponse:
    location = await service.deactivate_location(db, str(location_id), admin)
    return LocationResponse.model_validate(location)
