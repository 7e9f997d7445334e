"""
Fixtures for user module tests.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest

from academy.modules.users.models import User


class FakeUserStore:
    """In-memory stand-in for UserRepository, keyed the same way the queries are."""

    def __init__(self):
        self.users: list[User] = []
        self._counter = 0

    def add(self, user: User) -> User:
        self.users.append(user)
        return user

    def next_account_id(self, _db=None) -> str:
        self._counter += 1
        return f"APS{self._counter:03d}"

    async def create(self, db, **fields) -> User:
        now = datetime.now(UTC)
        fields.setdefault("is_active", True)
        fields["specialization"] = fields.get("specialization") or []
        user = User(id=str(uuid4()), created_at=now, updated_at=now, **fields)
        return self.add(user)

    async def get_by_id(self, db, user_id):
        return next((user for user in self.users if user.id == str(user_id)), None)

    async def email_exists(self, db, email: str) -> bool:
        return any(
            user.guardian_id is None and (user.email or "").lower() == email.lower()
            for user in self.users
        )

    async def find_duplicate_dependent(
        self, db, *, guardian_id, first_name, last_name, dob, exclude_id=None
    ):
        for user in self.users:
            if (
                user.guardian_id == guardian_id
                and user.first_name == first_name
                and user.last_name == last_name
                and user.dob == dob
                and user.id != exclude_id
            ):
                return user
        return None

    async def update(self, db, user: User, **fields) -> User:
        for name, value in fields.items():
            setattr(user, name, value)
        return user


@pytest.fixture
def user_store():
    """Patch the registration engine onto an in-memory user store."""
    store = FakeUserStore()
    with (
        patch("academy.modules.users.registration.UserRepository", store),
        patch(
            "academy.modules.users.registration.generate_next_account_id",
            AsyncMock(side_effect=store.next_account_id),
        ),
        patch(
            "academy.modules.users.registration.hash_password",
            side_effect=lambda password: f"hashed:{password}",
        ),
    ):
        yield store
