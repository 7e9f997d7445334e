"""
User Repository

Database operations for user management.
"""

import logging
from datetime import date
from typing import Any
from uuid import UUID

from sqlalchemy import func, select, text
from sqlalchemy.ext.asyncio import AsyncSession

from academy.modules.users.models import User, UserRole

logger = logging.getLogger(__name__)

# Arbitrary constant identifying the account-id advisory lock
ACCOUNT_ID_LOCK_KEY = 7_240_001


class UserRepository:
    """Repository for user database operations."""

    @staticmethod
    async def create(
        db: AsyncSession,
        *,
        account_id: str,
        first_name: str,
        last_name: str,
        password_hash: str,
        role: UserRole,
        email: str | None = None,
        phone: str | None = None,
        dob: date | None = None,
        gender: str | None = None,
        details: str | None = None,
        special_needs: bool = False,
        specialization: list[str] | None = None,
        photo_path: str | None = None,
        guardian_id: str | None = None,
        is_active: bool = True,
        created_by: str | None = None,
        updated_by: str | None = None,
    ) -> User:
        """
        Create a new user record.

        The row is flushed (not committed) so its id is available to the
        rest of the request's transaction.
        """
        user = User(
            account_id=account_id,
            first_name=first_name,
            last_name=last_name,
            email=email,
            phone=phone,
            dob=dob,
            gender=gender,
            details=details,
            special_needs=special_needs,
            specialization=specialization or [],
            photo_path=photo_path,
            password_hash=password_hash,
            role=role,
            guardian_id=guardian_id,
            is_active=is_active,
            created_by=created_by,
            updated_by=updated_by,
        )

        db.add(user)
        await db.flush()
        await db.refresh(user)

        logger.info(f"Created user: {user.id} - {user.account_id} ({user.role.value})")
        return user

    @staticmethod
    async def get_by_id(db: AsyncSession, user_id: str | UUID) -> User | None:
        """Get a user by internal id."""
        result = await db.execute(select(User).where(User.id == str(user_id)))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_by_email(db: AsyncSession, email: str) -> User | None:
        """
        Get the independent (non-dependent) account for an email.

        Dependents can share their guardian's email, so they are excluded.
        """
        result = await db.execute(
            select(User).where(
                func.lower(User.email) == email.lower(),
                User.guardian_id.is_(None),
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def get_dependent_by_email(db: AsyncSession, email: str) -> User | None:
        """Get the first dependent account carrying an email, if any."""
        result = await db.execute(
            select(User)
            .where(
                func.lower(User.email) == email.lower(),
                User.guardian_id.is_not(None),
            )
            .order_by(User.created_at)
            .limit(1)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def email_exists(db: AsyncSession, email: str) -> bool:
        """Check whether an independent or guardian account already uses an email."""
        user = await UserRepository.get_by_email(db, email)
        return user is not None

    @staticmethod
    async def find_duplicate_dependent(
        db: AsyncSession,
        *,
        guardian_id: str,
        first_name: str,
        last_name: str,
        dob: date,
        exclude_id: str | None = None,
    ) -> User | None:
        """
        Find a dependent of the same guardian with identical name and dob.

        Args:
            exclude_id: Id of the dependent being updated, ignored in the match
        """
        query = select(User).where(
            User.guardian_id == guardian_id,
            User.first_name == first_name,
            User.last_name == last_name,
            User.dob == dob,
            User.role == UserRole.STUDENT,
        )
        if exclude_id:
            query = query.where(User.id != exclude_id)

        result = await db.execute(query.limit(1))
        return result.scalar_one_or_none()

    @staticmethod
    async def lock_account_ids(db: AsyncSession) -> None:
        """
        Serialize account-id assignment for the rest of the transaction.

        Uses a PostgreSQL transaction-scoped advisory lock, released on
        commit or rollback.
        """
        await db.execute(
            text("SELECT pg_advisory_xact_lock(:key)"),
            {"key": ACCOUNT_ID_LOCK_KEY},
        )

    @staticmethod
    async def get_latest_account_id(db: AsyncSession, prefix: str) -> str | None:
        """
        Get the highest account id with a prefix.

        Suffixes are zero-padded to a minimum width and only ever grow, so
        the longest, then lexically highest, id is the numerically highest.
        Creation time is not used: ``now()`` is fixed at transaction start,
        so rows can commit in a different order than their ids.
        """
        result = await db.execute(
            select(User.account_id)
            .where(User.account_id.startswith(prefix))
            .order_by(func.length(User.account_id).desc(), User.account_id.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def list_users(
        db: AsyncSession,
        *,
        role: UserRole | None = None,
        is_active: bool | None = None,
        guardian_id: str | None = None,
    ) -> list[User]:
        """List users, newest first, with optional filters."""
        query = select(User)
        if role is not None:
            query = query.where(User.role == role)
        if is_active is not None:
            query = query.where(User.is_active == is_active)
        if guardian_id is not None:
            query = query.where(User.guardian_id == guardian_id)

        result = await db.execute(query.order_by(User.created_at.desc()))
        return list(result.scalars().all())

    @staticmethod
    async def list_dependents(db: AsyncSession, guardian_id: str) -> list[User]:
        """List a guardian's dependents in creation order."""
        result = await db.execute(
            select(User)
            .where(User.guardian_id == guardian_id)
            .order_by(User.created_at, User.account_id)
        )
        return list(result.scalars().all())

    @staticmethod
    async def update(db: AsyncSession, user: User, **fields: Any) -> User:
        """Apply field changes to a user and flush."""
        for name, value in fields.items():
            setattr(user, name, value)

        await db.flush()
        await db.refresh(user)

        logger.info(f"Updated user {user.id}: {sorted(fields)}")
        return user
