"""Categories Router"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.auth import require_admin
from academy.core.database import get_db
from academy.modules.categories import service
from academy.modules.categories.schemas import (
    CategoryDeleteResponse,
    CategoryPayload,
    CategoryResponse,
)
from academy.modules.users.models import User

router = APIRouter()


@router.post("", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_category(
    payload: CategoryPayload,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> CategoryResponse:
    category = await service.create_category(db, payload, admin)
    return CategoryResponse.model_validate(category)


@router.get("", response_model=list[CategoryResponse])
async def list_categories(
    is_active: bool | None = Query(None, alias="isActive"),
    db: AsyncSession = Depends(get_db),
) -> list[CategoryResponse]:
    categories = await service.list_categories(db, is_active=is_active)
    return [CategoryResponse.model_validate(category) for category in categories]


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(category_id: UUID, db: AsyncSession = Depends(get_db)) -> CategoryResponse:
    category = await service.get_category(db, str(category_id))
    return CategoryResponse.model_validate(category)


@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    category_id: UUID,
    payload: CategoryPayload,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> CategoryResponse:
    category = await service.update_category(db, str(category_id), payload, admin)
    return CategoryResponse.model_validate(category)


@router.delete("/{category_id}", response_model=CategoryDeleteResponse)
async def delete_category(
    category_id: UUID,
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> CategoryDeleteResponse:
    await service.delete_category(db, str(category_id))
    return CategoryDeleteResponse()
