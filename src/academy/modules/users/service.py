"""
User Service

Profile management on top of the registration engine: lookup, listing,
partial updates, soft deactivation and password rotation.
"""

import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.exceptions import BadRequestError
from academy.core.security import hash_password, verify_password
from academy.core.validation import calculate_age, parse_date
from academy.modules.users.exceptions import (
    ADULT_AGE,
    DependentTooOldError,
    DuplicateDependentError,
    ImmutableFieldError,
    NotYourDependentError,
    SelfDeactivationError,
    UserNotFoundError,
)
from academy.modules.users.models import User, UserRole
from academy.modules.users.repository import UserRepository
from academy.modules.users.schemas import PasswordChange, UserUpdate

logger = logging.getLogger(__name__)


async def get_user(db: AsyncSession, user_id: str) -> User:
    user = await UserRepository.get_by_id(db, user_id)
    if user is None:
        raise UserNotFoundError()
    return user


async def get_user_for_viewer(db: AsyncSession, viewer: User, user_id: str) -> User:
    """
    Load a user the viewer may see.

    Admins see everyone; parents see themselves and their own dependents.
    """
    user = await get_user(db, user_id)
    if viewer.role == UserRole.ADMIN or user.id == viewer.id:
        return user
    if user.guardian_id != viewer.id:
        logger.warning(f"User {viewer.account_id} denied access to {user.account_id}")
        raise NotYourDependentError()
    return user


async def list_users(
    db: AsyncSession,
    *,
    role: UserRole | None = None,
    is_active: bool | None = None,
    guardian_id: str | None = None,
) -> list[User]:
    return await UserRepository.list_users(
        db, role=role, is_active=is_active, guardian_id=guardian_id
    )


async def list_children(db: AsyncSession, guardian: User) -> list[User]:
    return await UserRepository.list_dependents(db, guardian.id)


async def update_user(
    db: AsyncSession,
    user_id: str,
    payload: UserUpdate,
    acting_user: User,
) -> User:
    """
    Apply a partial profile update.

    Raises:
        UserNotFoundError 404: Unknown id
        ImmutableFieldError 400: Attempt to change email or accountId
        DependentTooOldError 400: A dependent's new dob makes them an adult
        DuplicateDependentError 409: Clash with a sibling's name and dob
    """
    user = await get_user(db, user_id)

    if payload.email is not None and payload.email.strip().lower() != (user.email or "").lower():
        raise ImmutableFieldError("email")
    if payload.account_id is not None and payload.account_id.strip() != user.account_id:
        raise ImmutableFieldError("accountId")

    changes: dict[str, Any] = {
        name: value
        for name, value in payload.model_dump(
            exclude_unset=True, exclude={"email", "account_id", "dob"}
        ).items()
        if value is not None
    }
    for name in ("first_name", "last_name"):
        if name in changes:
            changes[name] = changes[name].strip()
            if not changes[name]:
                raise BadRequestError(f"{name} cannot be empty.", error_code="MISSING_FIELDS")

    # Only staff carry a specialization
    if user.role != UserRole.STAFF:
        changes.pop("specialization", None)

    if payload.dob:
        dob = parse_date(payload.dob.strip(), "dob")
        if user.is_dependent and dob != user.dob and calculate_age(dob) >= ADULT_AGE:
            raise DependentTooOldError()
        changes["dob"] = dob

    if user.is_dependent:
        dob = changes.get("dob", user.dob)
        first_name = changes.get("first_name", user.first_name)
        last_name = changes.get("last_name", user.last_name)
        if dob is not None:
            duplicate = await UserRepository.find_duplicate_dependent(
                db,
                guardian_id=user.guardian_id,
                first_name=first_name,
                last_name=last_name,
                dob=dob,
                exclude_id=user.id,
            )
            if duplicate is not None:
                raise DuplicateDependentError(first_name, last_name)

    if "is_active" in changes and user.id == acting_user.id and not changes["is_active"]:
        raise SelfDeactivationError()

    changes["updated_by"] = acting_user.id
    return await UserRepository.update(db, user, **changes)


async def deactivate_user(db: AsyncSession, user_id: str, acting_user: User) -> User:
    """Soft-delete: the account is kept but can no longer authenticate."""
    user = await get_user(db, user_id)

    if user.id == acting_user.id:
        raise SelfDeactivationError()

    if not user.is_active:
        return user

    logger.info(f"User {user.account_id} deactivated by {acting_user.account_id}")
    return await UserRepository.update(db, user, is_active=False, updated_by=acting_user.id)


async def change_password(db: AsyncSession, user: User, payload: PasswordChange) -> None:
    if not verify_password(payload.current_password, user.password_hash):
        logger.warning(f"Password change rejected for {user.account_id}: wrong current password")
        raise BadRequestError("Current password is incorrect.", error_code="INVALID_PASSWORD")

    await UserRepository.update(
        db,
        user,
        password_hash=hash_password(payload.new_password),
        updated_by=user.id,
    )
    logger.info(f"Password changed for {user.account_id}")
