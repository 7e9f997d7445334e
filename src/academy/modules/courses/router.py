"""
Courses Router

Reads are public; writes require an admin. Create and update accept JSON
or a multipart form with the media file under the ``course`` field.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.auth import require_admin
from academy.core.database import get_db
from academy.modules.courses import service
from academy.modules.courses.schemas import CourseDeleteResponse, CoursePayload, CourseResponse
from academy.modules.shared.media import media_payload
from academy.modules.users.models import User

router = APIRouter()

MEDIA_FIELD = "course"
MEDIA_FOLDER = "courses"


@router.post("", response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
async def create_course(
    request: Request,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> CourseResponse:
    async with media_payload(
        request, CoursePayload, file_field=MEDIA_FIELD, folder=MEDIA_FOLDER
    ) as payload:
        course = await service.create_course(db, payload, admin)
    return CourseResponse.model_validate(course)


@router.get("", response_model=list[CourseResponse])
async def list_courses(
    title: str | None = Query(None),
    category_id: UUID | None = Query(None, alias="categoryId"),
    is_active: bool | None = Query(None, alias="isActive"),
    age_range: str | None = Query(None, alias="ageRange"),
    db: AsyncSession = Depends(get_db),
) -> list[CourseResponse]:
    courses = await service.list_courses(
        db,
        title=title,
        category_id=str(category_id) if category_id else None,
        is_active=is_active,
        age_range=age_range,
    )
    return [CourseResponse.model_validate(course) for course in courses]


@router.get("/{course_id}", response_model=CourseResponse)
async def get_course(course_id: UUID, db: AsyncSession = Depends(get_db)) -> CourseResponse:
    course = await service.get_course(db, str(course_id))
    return CourseResponse.model_validate(course)


@router.put("/{course_id}", response_model=CourseResponse)
async def update_course(
    course_id: UUID,
    request: Request,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> CourseResponse:
    async with media_payload(
        request, CoursePayload, file_field=MEDIA_FIELD, folder=MEDIA_FOLDER
    ) as payload:
        course = await service.update_course(db, str(course_id), payload, admin)
    return CourseResponse.model_validate(course)


@router.delete("/{course_id}", response_model=CourseDeleteResponse)
async def delete_course(
    course_id: UUID,
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> CourseDeleteResponse:
    await service.delete_course(db, str(course_id))
    return CourseDeleteResponse()
