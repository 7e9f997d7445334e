"""
Shared test fixtures.

Environment overrides are applied before the application settings are
first imported.
"""

import os

os.environ.setdefault("PYTHON_ENV", "test")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")

from datetime import UTC, date, datetime  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402
from uuid import uuid4  # noqa: E402

import pytest  # noqa: E402

from academy.core.rate_limit import reset_memory_store  # noqa: E402
from academy.core.validation import format_date  # noqa: E402
from academy.modules.users.models import User, UserRole  # noqa: E402


def years_ago(years: int) -> str:
    """dd-MM-yyyy date of birth for someone exactly ``years`` old this year."""
    return format_date(date(date.today().year - years, 1, 1))


def build_user(
    role: UserRole = UserRole.STUDENT,
    *,
    account_id: str = "APS001",
    email: str | None = "user@test.com",
    guardian_id: str | None = None,
    is_active: bool = True,
    **fields,
) -> User:
    """Detached User row with every column the response schemas read."""
    now = datetime.now(UTC)
    values = {
        "id": str(uuid4()),
        "account_id": account_id,
        "first_name": "Test",
        "last_name": "User",
        "email": email,
        "phone": None,
        "dob": None,
        "gender": None,
        "details": None,
        "special_needs": False,
        "specialization": [],
        "photo_path": None,
        "password_hash": "hashed",
        "role": role,
        "guardian_id": guardian_id,
        "is_active": is_active,
        "created_at": now,
        "updated_at": now,
    }
    values.update(fields)
    return User(**values)


@pytest.fixture
def make_user():
    """Factory for detached User rows."""
    return build_user


@pytest.fixture
def dob_years_ago():
    """Factory for dd-MM-yyyy birth dates of a given age."""
    return years_ago


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.flush = AsyncMock()
    db.refresh = AsyncMock()
    db.get = AsyncMock()
    db.execute = AsyncMock()
    db.add = MagicMock()
    db.delete = AsyncMock()
    return db


@pytest.fixture
def admin_user():
    return build_user(UserRole.ADMIN, account_id="APS001", email="admin@test.com")


@pytest.fixture
def parent_user():
    return build_user(UserRole.PARENT, account_id="APS002", email="parent@test.com")


@pytest.fixture
def staff_user():
    return build_user(UserRole.STAFF, account_id="APS003", email="tutor@test.com")


@pytest.fixture(autouse=True)
def _clear_rate_limits():
    """Each test starts with empty in-process rate limit counters."""
    reset_memory_store()
    yield
    reset_memory_store()
