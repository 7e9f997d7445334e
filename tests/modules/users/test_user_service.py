"""
Unit tests for user profile management.
"""

from datetime import date
from unittest.mock import AsyncMock, patch

import pytest

from academy.core.exceptions import BadRequestError
from academy.core.security import hash_password, verify_password
from academy.modules.users.exceptions import (
    DependentTooOldError,
    ImmutableFieldError,
    NotYourDependentError,
    UserNotFoundError,
)
from academy.modules.users.models import UserRole
from academy.modules.users.schemas import PasswordChange, UserUpdate
from academy.modules.users.service import (
    change_password,
    deactivate_user,
    get_user_for_viewer,
    update_user,
)

REPOSITORY = "academy.modules.users.service.UserRepository"


async def _apply(db, user, **fields):
    for name, value in fields.items():
        setattr(user, name, value)
    return user


class TestGetUserForViewer:
    @pytest.mark.asyncio
    async def test_parent_sees_own_dependent(self, mock_db, parent_user, make_user):
        child = make_user(UserRole.STUDENT, guardian_id=parent_user.id)
        with patch(f"{REPOSITORY}.get_by_id", AsyncMock(return_value=child)):
            assert await get_user_for_viewer(mock_db, parent_user, child.id) is child

    @pytest.mark.asyncio
    async def test_parent_cannot_see_other_accounts(self, mock_db, parent_user, make_user):
        stranger = make_user(UserRole.STUDENT, guardian_id="another-parent")
        with patch(f"{REPOSITORY}.get_by_id", AsyncMock(return_value=stranger)):
            with pytest.raises(NotYourDependentError):
                await get_user_for_viewer(mock_db, parent_user, stranger.id)

    @pytest.mark.asyncio
    async def test_admin_sees_everyone(self, mock_db, admin_user, staff_user):
        with patch(f"{REPOSITORY}.get_by_id", AsyncMock(return_value=staff_user)):
            assert await get_user_for_viewer(mock_db, admin_user, staff_user.id) is staff_user

    @pytest.mark.asyncio
    async def test_unknown_user(self, mock_db, admin_user):
        with patch(f"{REPOSITORY}.get_by_id", AsyncMock(return_value=None)):
            with pytest.raises(UserNotFoundError):
                await get_user_for_viewer(mock_db, admin_user, "missing")


class TestUpdateUser:
    @pytest.mark.asyncio
    async def test_updates_profile_fields(self, mock_db, admin_user, staff_user):
        with (
            patch(f"{REPOSITORY}.get_by_id", AsyncMock(return_value=staff_user)),
            patch(f"{REPOSITORY}.update", AsyncMock(side_effect=_apply)),
        ):
            updated = await update_user(
                mock_db,
                staff_user.id,
                UserUpdate(first_name=" Tom ", phone="0400 000 000"),
                acting_user=admin_user,
            )

        assert updated.first_name == "Tom"
        assert updated.phone == "0400 000 000"
        assert updated.updated_by == admin_user.id

    @pytest.mark.asyncio
    async def test_email_cannot_change(self, mock_db, admin_user, staff_user):
        with patch(f"{REPOSITORY}.get_by_id", AsyncMock(return_value=staff_user)):
            with pytest.raises(ImmutableFieldError):
                await update_user(
                    mock_db, staff_user.id, UserUpdate(email="new@test.com"), admin_user
                )

    @pytest.mark.asyncio
    async def test_same_email_is_accepted(self, mock_db, admin_user, staff_user):
        with (
            patch(f"{REPOSITORY}.get_by_id", AsyncMock(return_value=staff_user)),
            patch(f"{REPOSITORY}.update", AsyncMock(side_effect=_apply)),
        ):
            await update_user(
                mock_db, staff_user.id, UserUpdate(email="TUTOR@test.com"), admin_user
            )

    @pytest.mark.asyncio
    async def test_account_id_cannot_change(self, mock_db, admin_user, staff_user):
        with patch(f"{REPOSITORY}.get_by_id", AsyncMock(return_value=staff_user)):
            with pytest.raises(ImmutableFieldError):
                await update_user(
                    mock_db, staff_user.id, UserUpdate(account_id="APS777"), admin_user
                )

    @pytest.mark.asyncio
    async def test_dependent_dob_must_stay_under_eighteen(
        self, mock_db, admin_user, parent_user, make_user, dob_years_ago
    ):
        child = make_user(
            UserRole.STUDENT,
            guardian_id=parent_user.id,
            dob=date(date.today().year - 10, 1, 1),
        )
        with patch(f"{REPOSITORY}.get_by_id", AsyncMock(return_value=child)):
            with pytest.raises(DependentTooOldError):
                await update_user(
                    mock_db, child.id, UserUpdate(dob=dob_years_ago(20)), admin_user
                )

    @pytest.mark.asyncio
    async def test_admin_cannot_deactivate_self_through_update(self, mock_db, admin_user):
        with patch(f"{REPOSITORY}.get_by_id", AsyncMock(return_value=admin_user)):
            with pytest.raises(BadRequestError) as exc_info:
                await update_user(
                    mock_db, admin_user.id, UserUpdate(is_active=False), admin_user
                )
        assert exc_info.value.error_code == "SELF_DEACTIVATION"

    @pytest.mark.asyncio
    async def test_staff_specialization_updates(self, mock_db, admin_user, staff_user):
        with (
            patch(f"{REPOSITORY}.get_by_id", AsyncMock(return_value=staff_user)),
            patch(f"{REPOSITORY}.update", AsyncMock(side_effect=_apply)),
        ):
            updated = await update_user(
                mock_db, staff_user.id, UserUpdate(specialization=["Cello"]), admin_user
            )

        assert updated.specialization == ["Cello"]

    @pytest.mark.asyncio
    async def test_students_never_gain_specialization(
        self, mock_db, admin_user, parent_user, make_user
    ):
        child = make_user(UserRole.STUDENT, guardian_id=parent_user.id)
        with (
            patch(f"{REPOSITORY}.get_by_id", AsyncMock(return_value=child)),
            patch(f"{REPOSITORY}.update", AsyncMock(side_effect=_apply)),
        ):
            updated = await update_user(
                mock_db,
                child.id,
                UserUpdate(specialization=["Piano"], phone="0400 111 222"),
                admin_user,
            )

        assert updated.specialization == []
        assert updated.phone == "0400 111 222"


class TestDeactivateUser:
    @pytest.mark.asyncio
    async def test_deactivates(self, mock_db, admin_user, parent_user):
        with (
            patch(f"{REPOSITORY}.get_by_id", AsyncMock(return_value=parent_user)),
            patch(f"{REPOSITORY}.update", AsyncMock(side_effect=_apply)),
        ):
            user = await deactivate_user(mock_db, parent_user.id, admin_user)

        assert user.is_active is False
        assert user.updated_by == admin_user.id

    @pytest.mark.asyncio
    async def test_refuses_self(self, mock_db, admin_user):
        with patch(f"{REPOSITORY}.get_by_id", AsyncMock(return_value=admin_user)):
            with pytest.raises(BadRequestError):
                await deactivate_user(mock_db, admin_user.id, admin_user)


class TestChangePassword:
    @pytest.mark.asyncio
    async def test_wrong_current_password(self, mock_db, make_user):
        user = make_user(password_hash=hash_password("old-pass"))

        with pytest.raises(BadRequestError) as exc_info:
            await change_password(
                mock_db, user, PasswordChange(current_password="nope", new_password="new-pass")
            )
        assert exc_info.value.error_code == "INVALID_PASSWORD"

    @pytest.mark.asyncio
    async def test_rotates_hash(self, mock_db, make_user):
        user = make_user(password_hash=hash_password("old-pass"))

        with patch(f"{REPOSITORY}.update", AsyncMock(side_effect=_apply)):
            await change_password(
                mock_db,
                user,
                PasswordChange(current_password="old-pass", new_password="new-pass"),
            )

        assert verify_password("new-pass", user.password_hash)
