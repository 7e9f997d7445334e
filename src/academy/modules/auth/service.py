"""Credential checks and session token issuance."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.exceptions import ForbiddenError, UnauthorizedError
from academy.core.security import create_access_token, verify_password
from academy.modules.users.models import User
from academy.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)


class DependentLoginError(ForbiddenError):
    """Dependents are accessed through their guardian's account."""

    def __init__(self):
        super().__init__("Please login using guardian account", error_code="DEPENDENT_LOGIN")


class InvalidCredentialsError(UnauthorizedError):
    def __init__(self):
        super().__init__("Invalid email or password.", error_code="INVALID_CREDENTIALS")


class AccountInactiveError(ForbiddenError):
    def __init__(self):
        super().__init__("Your account has been deactivated.", error_code="ACCOUNT_INACTIVE")


def create_session_token(user: User) -> str:
    """Signed access token for an account, carrying its email and role."""
    return create_access_token(
        subject=str(user.id),
        additional_claims={
            "accountId": user.account_id,
            "email": user.email,
            "role": user.role.value,
        },
    )


async def authenticate(db: AsyncSession, email: str, password: str) -> User:
    """
    Verify credentials and return the account.

    Raises:
        DependentLoginError 403: Email belongs only to a dependent account
        InvalidCredentialsError 401: Unknown email or wrong password
        AccountInactiveError 403: Account has been deactivated
    """
    normalized = email.strip().lower()
    user = await UserRepository.get_by_email(db, normalized)

    if user is None:
        if await UserRepository.get_dependent_by_email(db, normalized) is not None:
            logger.warning(f"Direct login attempt by dependent: {normalized}")
            raise DependentLoginError()
        logger.warning(f"Login attempt for non-existent email: {normalized}")
        raise InvalidCredentialsError()

    if user.is_dependent:
        raise DependentLoginError()

    if not verify_password(password, user.password_hash):
        logger.warning(f"Invalid password for user: {normalized}")
        raise InvalidCredentialsError()

    if not user.is_active:
        logger.warning(f"Login attempt for inactive account: {normalized}")
        raise AccountInactiveError()

    logger.info(f"User logged in: {user.account_id} (role: {user.role.value})")
    return user
