"""
Registration Engine

Turns submitted person records into accounts, deciding for each record
whether it becomes a Parent, a Student (dependent child or independent
adult) or Staff.

Flow shapes:
- SELF_SERVICE: one record is an independent adult; several records are a
  guardian followed by their children. The primary account gets a session.
- ADMIN_FAMILY: one record is a standalone parent; several records are a
  parent followed by children. No session is issued.
- ADMIN_STAFF: exactly one staff account.
- GUARDIAN_CHILDREN: every record is a child of an existing guardian.

Records are processed in order and each one is flushed before the next, so
later records see earlier ones (duplicate checks, guardian linkage). The
caller's session transaction makes the whole batch atomic.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.exceptions import BadRequestError
from academy.core.security import hash_password
from academy.core.validation import (
    calculate_age,
    ensure_valid_email,
    parse_date,
    validate_array_input,
    validate_required_fields,
)
from academy.modules.auth.service import create_session_token
from academy.modules.users.account_ids import generate_next_account_id
from academy.modules.users.exceptions import (
    ADULT_AGE,
    DependentTooOldError,
    DuplicateDependentError,
    DuplicateEmailError,
    GuardianRequiredError,
    ImmutableFieldError,
    InvalidGuardianError,
    NotYourDependentError,
    UserNotFoundError,
)
from academy.modules.users.models import User, UserRole
from academy.modules.users.repository import UserRepository
from academy.modules.users.schemas import ChildRecord, PersonRecord

logger = logging.getLogger(__name__)


class RegistrationFlow(str, Enum):
    SELF_SERVICE = "self_service"
    ADMIN_FAMILY = "admin_family"
    ADMIN_STAFF = "admin_staff"
    GUARDIAN_CHILDREN = "guardian_children"


class _Slot(str, Enum):
    """Position a record occupies in its batch."""

    GUARDIAN = "guardian"
    DEPENDENT = "dependent"
    INDEPENDENT = "independent"
    STAFF = "staff"


_SLOT_ROLES = {
    _Slot.GUARDIAN: UserRole.PARENT,
    _Slot.DEPENDENT: UserRole.STUDENT,
    _Slot.INDEPENDENT: UserRole.STUDENT,
    _Slot.STAFF: UserRole.STAFF,
}

_BASE_REQUIRED = ("firstName", "lastName", "password")


@dataclass
class RegistrationResult:
    """Accounts created by one call, in submission order."""

    accounts: list[User]
    primary: User
    access_token: str | None = None


@dataclass
class ChildrenUpsertResult:
    created: list[User]
    updated: list[User]


@dataclass
class _GuardianRef:
    id: str
    email: str | None


def _plan_slots(count: int, flow: RegistrationFlow) -> list[_Slot]:
    if flow == RegistrationFlow.GUARDIAN_CHILDREN:
        return [_Slot.DEPENDENT] * count

    if flow == RegistrationFlow.ADMIN_STAFF:
        if count != 1:
            raise BadRequestError(
                "Staff accounts must be created one at a time.",
                error_code="INVALID_DATA_FORMAT",
            )
        return [_Slot.STAFF]

    if count == 1:
        if flow == RegistrationFlow.SELF_SERVICE:
            return [_Slot.INDEPENDENT]
        return [_Slot.GUARDIAN]

    return [_Slot.GUARDIAN] + [_Slot.DEPENDENT] * (count - 1)


def _context_label(slot: _Slot, child_number: int) -> str:
    if slot == _Slot.GUARDIAN:
        return "Parent"
    if slot == _Slot.DEPENDENT:
        return f"Child {child_number}"
    if slot == _Slot.STAFF:
        return "Staff"
    return "User"


def _required_fields(slot: _Slot) -> list[str]:
    required = list(_BASE_REQUIRED)
    if slot in (_Slot.GUARDIAN, _Slot.INDEPENDENT, _Slot.STAFF):
        required.append("email")
    if slot in (_Slot.DEPENDENT, _Slot.INDEPENDENT):
        required.append("dob")
    return required


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


async def _ensure_email_available(db: AsyncSession, email: str, context: str) -> None:
    if await UserRepository.email_exists(db, email):
        logger.warning(f"Registration rejected, email already in use: {email}")
        raise DuplicateEmailError(email, context)


async def _ensure_not_duplicate_dependent(
    db: AsyncSession,
    *,
    guardian_id: str,
    first_name: str,
    last_name: str,
    dob: date,
    context: str,
    exclude_id: str | None = None,
) -> None:
    duplicate = await UserRepository.find_duplicate_dependent(
        db,
        guardian_id=guardian_id,
        first_name=first_name,
        last_name=last_name,
        dob=dob,
        exclude_id=exclude_id,
    )
    if duplicate is not None:
        logger.warning(
            f"Duplicate dependent rejected for guardian {guardian_id}: "
            f"{first_name} {last_name} ({duplicate.account_id})"
        )
        raise DuplicateDependentError(first_name, last_name, context)


async def _create_account(
    db: AsyncSession,
    record: PersonRecord,
    *,
    slot: _Slot,
    context: str,
    flow: RegistrationFlow,
    guardian: _GuardianRef | None,
    acting_user: User | None,
) -> User:
    """Validate one record and persist it."""
    validate_required_fields(record.wire_dict(), _required_fields(slot), context)

    first_name = record.first_name.strip()
    last_name = record.last_name.strip()

    # Email: own address must be free; a dependent without one inherits the guardian's
    email = _clean(record.email)
    if email is not None:
        email = ensure_valid_email(email, f"{context} email")
        inherited = (
            slot == _Slot.DEPENDENT
            and guardian is not None
            and guardian.email is not None
            and email == guardian.email.lower()
        )
        if not inherited:
            await _ensure_email_available(db, email, context)
    elif slot == _Slot.DEPENDENT and guardian is not None:
        email = guardian.email

    dob = None
    if _clean(record.dob) is not None:
        dob = parse_date(record.dob.strip(), f"{context} dob")
        age = calculate_age(dob)

        if slot == _Slot.INDEPENDENT and flow == RegistrationFlow.SELF_SERVICE and age < ADULT_AGE:
            logger.warning(f"Self-registration rejected for under-age applicant ({age})")
            raise GuardianRequiredError(context)
        if slot == _Slot.DEPENDENT and age >= ADULT_AGE:
            raise DependentTooOldError(context)

    if slot == _Slot.DEPENDENT and guardian is not None and dob is not None:
        await _ensure_not_duplicate_dependent(
            db,
            guardian_id=guardian.id,
            first_name=first_name,
            last_name=last_name,
            dob=dob,
            context=context,
        )

    account_id = await generate_next_account_id(db)
    acting_id = acting_user.id if acting_user else None

    return await UserRepository.create(
        db,
        account_id=account_id,
        first_name=first_name,
        last_name=last_name,
        email=email,
        phone=_clean(record.phone),
        dob=dob,
        gender=_clean(record.gender),
        details=record.details,
        special_needs=bool(record.special_needs),
        specialization=record.specialization if slot == _Slot.STAFF else [],
        photo_path=_clean(record.photo_path),
        password_hash=hash_password(record.password),
        role=_SLOT_ROLES[slot],
        guardian_id=guardian.id if slot == _Slot.DEPENDENT and guardian else None,
        created_by=acting_id,
        updated_by=acting_id,
    )


def _ensure_can_be_guardian(guardian: User) -> None:
    if guardian.is_dependent or guardian.role != UserRole.PARENT:
        raise InvalidGuardianError()


async def register_accounts(
    db: AsyncSession,
    records: Sequence[PersonRecord],
    flow: RegistrationFlow,
    acting_user: User | None = None,
    guardian: User | None = None,
) -> RegistrationResult:
    """
    Register one or more people as a single batch.

    Args:
        db: Request session; nothing is committed here
        records: Submitted people, guardian first when there are several
        flow: Which registration path is being served
        acting_user: Authenticated account performing the call (None for
            self-service)
        guardian: Existing guardian, required for GUARDIAN_CHILDREN

    Returns:
        RegistrationResult with the created accounts, the primary account and,
        for self-service, a session token for the primary account

    Raises:
        BadRequestError: Missing fields, malformed values or age policy
        ConflictError: Email already registered or duplicate dependent
    """
    validate_array_input(records, 1, "At least one user record is required.")

    guardian_ref: _GuardianRef | None = None
    if flow == RegistrationFlow.GUARDIAN_CHILDREN:
        if guardian is None:
            raise InvalidGuardianError("A guardian is required to add dependents.")
        _ensure_can_be_guardian(guardian)
        guardian_ref = _GuardianRef(id=guardian.id, email=guardian.email)

    slots = _plan_slots(len(records), flow)
    accounts: list[User] = []
    child_number = 0

    for record, slot in zip(records, slots, strict=True):
        if slot == _Slot.DEPENDENT:
            child_number += 1

        user = await _create_account(
            db,
            record,
            slot=slot,
            context=_context_label(slot, child_number),
            flow=flow,
            guardian=guardian_ref,
            acting_user=acting_user,
        )
        accounts.append(user)

        if slot == _Slot.GUARDIAN:
            guardian_ref = _GuardianRef(id=user.id, email=user.email)

    primary = accounts[0]
    access_token = None
    if flow == RegistrationFlow.SELF_SERVICE:
        access_token = create_session_token(primary)

    logger.info(
        f"Registered {len(accounts)} account(s) via {flow.value}: "
        f"{', '.join(user.account_id for user in accounts)}"
    )
    return RegistrationResult(accounts=accounts, primary=primary, access_token=access_token)


async def _update_child(
    db: AsyncSession,
    guardian: User,
    child: ChildRecord,
    context: str,
    acting_user: User,
) -> User:
    existing = await UserRepository.get_by_id(db, child.id)
    if existing is None:
        raise UserNotFoundError(context)
    if existing.guardian_id != guardian.id:
        logger.warning(f"User {acting_user.id} tried to edit non-dependent {existing.id}")
        raise NotYourDependentError(context)

    email = _clean(child.email)
    if email is not None and email.lower() != (existing.email or "").lower():
        raise ImmutableFieldError("email", context)
    account_id = _clean(child.account_id)
    if account_id is not None and account_id != existing.account_id:
        raise ImmutableFieldError("accountId", context)

    changes: dict[str, Any] = {
        name: value
        for name, value in child.model_dump(
            exclude_unset=True,
            exclude={"id", "account_id", "email", "password", "dob", "specialization"},
        ).items()
        if value is not None
    }
    for name in ("first_name", "last_name"):
        if name in changes:
            changes[name] = changes[name].strip()
            if not changes[name]:
                raise BadRequestError(
                    f"{context}: {name} cannot be empty.",
                    error_code="MISSING_FIELDS",
                )

    if _clean(child.password) is not None:
        changes["password_hash"] = hash_password(child.password)

    dob = existing.dob
    if _clean(child.dob) is not None:
        dob = parse_date(child.dob.strip(), f"{context} dob")
        if dob != existing.dob:
            if calculate_age(dob) >= ADULT_AGE:
                raise DependentTooOldError(context)
            changes["dob"] = dob

    if dob is not None:
        await _ensure_not_duplicate_dependent(
            db,
            guardian_id=guardian.id,
            first_name=changes.get("first_name", existing.first_name),
            last_name=changes.get("last_name", existing.last_name),
            dob=dob,
            context=context,
            exclude_id=existing.id,
        )

    changes["updated_by"] = acting_user.id
    return await UserRepository.update(db, existing, **changes)


async def upsert_children(
    db: AsyncSession,
    guardian: User,
    children: Sequence[ChildRecord],
    acting_user: User,
) -> ChildrenUpsertResult:
    """
    Add or update a guardian's dependents.

    Records carrying an ``id`` update that dependent (which must belong to
    ``guardian``); the rest are created as new dependents of ``guardian``.
    """
    validate_array_input(children, 1, "At least one child record is required.")
    _ensure_can_be_guardian(guardian)

    guardian_ref = _GuardianRef(id=guardian.id, email=guardian.email)
    created: list[User] = []
    updated: list[User] = []

    for number, child in enumerate(children, start=1):
        context = f"Child {number}"
        if _clean(child.id) is not None:
            updated.append(await _update_child(db, guardian, child, context, acting_user))
        else:
            created.append(
                await _create_account(
                    db,
                    child,
                    slot=_Slot.DEPENDENT,
                    context=context,
                    flow=RegistrationFlow.GUARDIAN_CHILDREN,
                    guardian=guardian_ref,
                    acting_user=acting_user,
                )
            )

    logger.info(
        f"Guardian {guardian.account_id}: {len(created)} dependent(s) added, "
        f"{len(updated)} updated"
    )
    return ChildrenUpsertResult(created=created, updated=updated)
