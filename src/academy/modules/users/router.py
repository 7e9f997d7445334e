"""
Users Router

Registration (self-service and admin-driven), guardian management of
dependents, and admin user management.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.auth import (
    get_current_user,
    require_admin,
    require_admin_or_parent,
    set_session_cookie,
)
from academy.core.config import settings
from academy.core.database import get_db
from academy.core.rate_limit import rate_limit
from academy.modules.users import service
from academy.modules.users.models import User, UserRole
from academy.modules.users.registration import (
    RegistrationFlow,
    RegistrationResult,
    register_accounts,
    upsert_children,
)
from academy.modules.users.schemas import (
    ChildRecord,
    ChildrenUpsertResponse,
    MessageResponse,
    PasswordChange,
    PersonRecord,
    RegistrationResponse,
    UserResponse,
    UserUpdate,
    UserWithDependentsResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _as_list(payload):
    return payload if isinstance(payload, list) else [payload]


def _registration_response(result: RegistrationResult, message: str) -> RegistrationResponse:
    return RegistrationResponse(
        message=message,
        user=UserResponse.model_validate(result.primary),
        accounts=[UserResponse.model_validate(user) for user in result.accounts],
    )


async def _resolve_guardian(db: AsyncSession, user: User, guardian_id: UUID | None) -> User:
    """Parents act on themselves; admins may name the parent to act on."""
    if guardian_id and user.role == UserRole.ADMIN:
        return await service.get_user(db, str(guardian_id))
    return user


# =============================================================================
# Registration
# =============================================================================


@router.post(
    "/register",
    response_model=RegistrationResponse,
    status_code=status.HTTP_201_CREATED,
)
@rate_limit(
    limit=lambda: settings.login_rate_limit,
    window_seconds=lambda: settings.login_rate_limit_window_seconds,
)
async def register(
    request: Request,
    response: Response,
    payload: list[PersonRecord] | PersonRecord = Body(...),
    db: AsyncSession = Depends(get_db),
) -> RegistrationResponse:
    """
    Self-service registration.

    One record registers an independent adult (18+). Several records
    register a parent followed by their children (each under 18). The
    primary account's session is set in its role cookie.
    """
    result = await register_accounts(db, _as_list(payload), RegistrationFlow.SELF_SERVICE)
    set_session_cookie(response, result.primary.role, result.access_token)
    return _registration_response(result, "User registered successfully.")


@router.post(
    "/admin/family",
    response_model=RegistrationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def admin_create_family(
    payload: list[PersonRecord] | PersonRecord = Body(...),
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> RegistrationResponse:
    """Create a parent, optionally with children. The admin's own session is untouched."""
    result = await register_accounts(
        db, _as_list(payload), RegistrationFlow.ADMIN_FAMILY, acting_user=admin
    )
    return _registration_response(result, "Family created successfully.")


@router.post(
    "/admin/staff",
    response_model=RegistrationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def admin_create_staff(
    payload: PersonRecord,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> RegistrationResponse:
    result = await register_accounts(
        db, [payload], RegistrationFlow.ADMIN_STAFF, acting_user=admin
    )
    return _registration_response(result, "Staff account created successfully.")


# =============================================================================
# Self / guardian endpoints
# =============================================================================


@router.get("/me/children", response_model=list[UserResponse])
async def list_my_children(
    guardian_id: UUID | None = Query(None, alias="guardianId"),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_admin_or_parent),
) -> list[UserResponse]:
    guardian = await _resolve_guardian(db, user, guardian_id)
    children = await service.list_children(db, guardian)
    return [UserResponse.model_validate(child) for child in children]


@router.post("/me/children", response_model=ChildrenUpsertResponse)
async def upsert_my_children(
    payload: list[ChildRecord] | ChildRecord = Body(...),
    guardian_id: UUID | None = Query(None, alias="guardianId"),
    db: AsyncSession = Depends(get_db),
    user: User = Depends(require_admin_or_parent),
) -> ChildrenUpsertResponse:
    """
    Add or update dependents.

    Records with an ``id`` update that child; records without one create a
    new child under the guardian.
    """
    guardian = await _resolve_guardian(db, user, guardian_id)
    result = await upsert_children(db, guardian, _as_list(payload), acting_user=user)
    return ChildrenUpsertResponse(
        message="Children saved successfully.",
        created=[UserResponse.model_validate(child) for child in result.created],
        updated=[UserResponse.model_validate(child) for child in result.updated],
    )


@router.patch("/me/password", response_model=MessageResponse)
async def change_my_password(
    payload: PasswordChange,
    db: AsyncSession = Depends(get_db),
    user: User = Depends(get_current_user),
) -> MessageResponse:
    await service.change_password(db, user, payload)
    return MessageResponse(message="Password updated successfully.")


# =============================================================================
# Admin management
# =============================================================================


@router.get("", response_model=list[UserResponse])
async def list_users(
    role: UserRole | None = Query(None),
    is_active: bool | None = Query(None, alias="isActive"),
    guardian_id: UUID | None = Query(None, alias="guardianId"),
    db: AsyncSession = Depends(get_db),
    _admin: User = Depends(require_admin),
) -> list[UserResponse]:
    users = await service.list_users(
        db, role=role, is_active=is_active, guardian_id=str(guardian_id) if guardian_id else None
    )
    return [UserResponse.model_validate(user) for user in users]


@router.get("/{user_id}", response_model=UserWithDependentsResponse)
async def get_user(
    user_id: UUID,
    db: AsyncSession = Depends(get_db),
    viewer: User = Depends(require_admin_or_parent),
) -> UserWithDependentsResponse:
    """A single account; a parent account also lists its dependents."""
    user = await service.get_user_for_viewer(db, viewer, str(user_id))
    dependents = await service.list_children(db, user) if user.role == UserRole.PARENT else []
    # Read columns only; the dependents relationship is not loaded
    profile = {name: getattr(user, name) for name in UserResponse.model_fields}
    return UserWithDependentsResponse(
        **profile,
        dependents=[UserResponse.model_validate(child) for child in dependents],
    )


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: UUID,
    payload: UserUpdate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> UserResponse:
    user = await service.update_user(db, str(user_id), payload, acting_user=admin)
    return UserResponse.model_validate(user)


@router.patch("/{user_id}/deactivate", response_model=UserResponse)
async def deactivate_user(
    user_id: UUID,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(require_admin),
) -> UserResponse:
    user = await service.deactivate_user(db, str(user_id), acting_user=admin)
    return UserResponse.model_validate(user)
