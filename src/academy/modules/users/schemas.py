"""
User Schemas

Request and response bodies for registration and user management.

Person fields are deliberately optional here: presence is checked by the
registration engine so a single error can name every missing field.
"""

from datetime import date, datetime

from pydantic import Field, field_serializer, field_validator

from academy.core.validation import format_date
from academy.modules.shared import CamelModel, UUIDStr
from academy.modules.users.models import UserRole


class PersonRecord(CamelModel):
    """One person submitted for registration."""

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    password: str | None = None
    phone: str | None = None
    dob: str | None = Field(None, description="Date of birth, dd-MM-yyyy")
    gender: str | None = None
    details: str | None = None
    special_needs: bool | None = None
    specialization: list[str] | None = None
    photo_path: str | None = None

    @field_validator("special_needs", mode="before")
    @classmethod
    def collapse_special_needs(cls, value):
        """Accept true/false/yes/no strings from form posts; blank means unset."""
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in ("", "null", "undefined"):
                return None
            if lowered in ("true", "yes", "1"):
                return True
            if lowered in ("false", "no", "0"):
                return False
        return value


class ChildRecord(PersonRecord):
    """A dependent submitted by a guardian; ``id`` selects the update path."""

    id: UUIDStr | None = None
    account_id: str | None = None


class UserUpdate(CamelModel):
    """
    Partial profile update.

    ``email`` and ``account_id`` are accepted only so a change attempt can be
    rejected explicitly.
    """

    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    account_id: str | None = None
    phone: str | None = None
    dob: str | None = None
    gender: str | None = None
    details: str | None = None
    special_needs: bool | None = None
    specialization: list[str] | None = None
    photo_path: str | None = None
    is_active: bool | None = None


class PasswordChange(CamelModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=1)


class UserResponse(CamelModel):
    """Public view of an account (never includes the password hash)."""

    id: str
    account_id: str
    first_name: str
    last_name: str
    email: str | None = None
    phone: str | None = None
    dob: date | None = None
    gender: str | None = None
    details: str | None = None
    special_needs: bool = False
    specialization: list[str] = []
    photo_path: str | None = None
    role: UserRole
    guardian_id: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @field_serializer("dob")
    def serialize_dob(self, value: date | None) -> str | None:
        return format_date(value) if value else None


class UserWithDependentsResponse(UserResponse):
    dependents: list[UserResponse] = []


class RegistrationResponse(CamelModel):
    """Accounts created by one registration call; ``user`` is the primary account."""

    message: str
    user: UserResponse
    accounts: list[UserResponse]


class ChildrenUpsertResponse(CamelModel):
    message: str
    created: list[UserResponse]
    updated: list[UserResponse]


class MessageResponse(CamelModel):
    message: str
