"""
Classes Router

All routes require authentication; writes require an admin.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.auth import get_current_user, require_admin
from academy.core.database import get_db
from academy.modules.classes import service
from academy.modules.classes.schemas import ClassDeleteResponse, ClassPayload, ClassResponse
from academy.modules.users.models import User

router = APIRouter()


@router.post("", response_model=ClassResponse, status_code=status.HTTP_201_CREATED)
async def create_class(
    payload: ClassPayload,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> ClassResponse:
    course_class = await service.create_class(db, payload, admin)
    return ClassResponse.model_validate(course_class)


@router.get("", response_model=list[ClassResponse])
async def list_classes(
    course_id: UUID | None = Query(None, alias="courseId"),
    location_id: UUID | None = Query(None, alias="locationId"),
    is_active: bool | None = Query(None, alias="isActive"),
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> list[ClassResponse]:
    classes = await service.list_classes(
        db,
        course_id=str(course_id) if course_id else None,
        location_id=str(location_id) if location_id else None,
        is_active=is_active,
    )
    return [ClassResponse.model_validate(course_class) for course_class in classes]


@router.get("/{class_id}", response_model=ClassResponse)
async def get_class(
    class_id: UUID,
    db: AsyncSession = Depends(get_db),
    _user: User = Depends(get_current_user),
) -> ClassResponse:
    course_class = await service.get_class(db, str(class_id))
    return ClassResponse.model_validate(course_class)


@router.put("/{class_id}", response_model=ClassResponse)
async def update_class(
    class_id: UUID,
    payload: ClassPayload,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> ClassResponse:
    course_class = await service.update_class(db, str(class_id), payload, admin)
    return ClassResponse.model_validate(course_class)


@router.delete("/{class_id}", response_model=ClassDeleteResponse)
async def delete_class(
    class_id: UUID,
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> ClassDeleteResponse:
    await service.delete_class(db, str(class_id))
    return ClassDeleteResponse()
