"""
Authentication and Authorization Module

Provides authentication dependencies for FastAPI endpoints.

Each role keeps its session in its own cookie ("session channel"), named
``token_<role>``: token_admin, token_staff, token_student, token_parent.
One browser can therefore hold an admin and a parent session at the same
time. Requests are authenticated from the first channel holding a valid
session, falling back to an ``Authorization: Bearer`` header for API clients.

SECURITY NOTE:
- Tokens are stateless; logout only clears the cookie.
- The account is re-loaded on every request, so deactivation takes effect
  immediately even for unexpired tokens.
"""

import logging
from collections.abc import Callable, Coroutine
from typing import Any
from uuid import UUID

from fastapi import Depends, Request, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.config import settings
from academy.core.database import get_db
from academy.core.exceptions import AppError, ForbiddenError, UnauthorizedError
from academy.core.security import decode_token
from academy.modules.users.models import User, UserRole
from academy.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)

COOKIE_PREFIX = "token_"

# Security scheme for OpenAPI documentation
security = HTTPBearer(
    auto_error=False,
    description="JWT Bearer token (alternative to the role session cookie)",
)


def get_cookie_name_for_role(role: UserRole | str) -> str:
    """Session channel name for a role, e.g. Parent -> token_parent."""
    value = role.value if isinstance(role, UserRole) else str(role)
    return f"{COOKIE_PREFIX}{value.lower()}"


# Lookup order when several channels are present
SESSION_CHANNELS: tuple[str, ...] = tuple(
    get_cookie_name_for_role(role)
    for role in (UserRole.ADMIN, UserRole.STAFF, UserRole.STUDENT, UserRole.PARENT)
)


def set_session_cookie(response: Response, role: UserRole | str, token: str) -> str:
    """
    Store a session token in the role's channel.

    Returns:
        The cookie name used
    """
    name = get_cookie_name_for_role(role)
    response.set_cookie(
        key=name,
        value=token,
        max_age=settings.session_max_age_seconds,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        path="/",
    )
    return name


def clear_session_cookie(response: Response, role: UserRole | str) -> str:
    name = get_cookie_name_for_role(role)
    response.delete_cookie(
        key=name,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        path="/",
    )
    return name


def extract_session_tokens(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None,
) -> list[str]:
    """Tokens presented, in channel order, with the bearer token last."""
    tokens = [request.cookies[name] for name in SESSION_CHANNELS if request.cookies.get(name)]
    if credentials and credentials.credentials:
        tokens.append(credentials.credentials)
    return tokens


def _subject_from_token(token: str) -> str:
    payload = decode_token(token)

    if payload is None:
        logger.warning("Invalid or expired JWT token")
        raise UnauthorizedError(
            "Invalid or expired authentication token.",
            error_code="INVALID_TOKEN",
        )

    if payload.get("type", "access") != "access":
        logger.warning(f"Invalid token type: {payload.get('type')}")
        raise UnauthorizedError(
            "This endpoint requires an access token.",
            error_code="INVALID_TOKEN_TYPE",
        )

    try:
        return str(UUID(payload.get("sub") or ""))
    except ValueError as e:
        logger.warning(f"Invalid token claims: {e}")
        raise UnauthorizedError(
            "Token contains invalid or missing claims.",
            error_code="INVALID_TOKEN_CLAIMS",
        ) from e


async def _user_for_token(db: AsyncSession, token: str) -> User:
    user_id = _subject_from_token(token)
    user = await UserRepository.get_by_id(db, user_id)

    if user is None or not user.is_active:
        logger.warning(f"Token presented for missing or inactive account: {user_id}")
        raise ForbiddenError(
            "Your account is inactive or no longer exists.",
            error_code="ACCOUNT_INACTIVE",
        )
    return user


async def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    FastAPI dependency returning the authenticated account.

    Each presented token is tried in channel order; the first one that
    resolves to an active account wins.

    Raises:
        UnauthorizedError 401: No token, or the first token invalid/expired
        ForbiddenError 403: The first token's account no longer exists or
            is deactivated
    """
    tokens = extract_session_tokens(request, credentials)
    if not tokens:
        raise UnauthorizedError("Authentication required.", error_code="NOT_AUTHENTICATED")

    first_error: AppError | None = None
    for token in tokens:
        try:
            user = await _user_for_token(db, token)
        except (UnauthorizedError, ForbiddenError) as e:
            first_error = first_error or e
            continue

        logger.debug(f"Authenticated user: {user.account_id} ({user.role.value})")
        return user

    raise first_error


def require_roles(*roles: UserRole) -> Callable[..., Coroutine[Any, Any, User]]:
    """
    Build a dependency that admits only the given roles.

    Usage:
        @router.get("/admin/endpoint")
        async def endpoint(user: User = Depends(require_roles(UserRole.ADMIN))):
            ...
    """
    allowed = ", ".join(role.value for role in roles)

    async def dependency(user: User = Depends(get_current_user)) -> User:
        if user.role not in roles:
            logger.warning(
                f"Access denied: {user.account_id} has role '{user.role.value}', "
                f"requires one of: {allowed}"
            )
            raise ForbiddenError(
                f"This action requires one of the roles: {allowed}.",
                error_code="INSUFFICIENT_ROLE",
            )
        return user

    return dependency


require_admin = require_roles(UserRole.ADMIN)
require_admin_or_parent = require_roles(UserRole.ADMIN, UserRole.PARENT)


__all__ = [
    "SESSION_CHANNELS",
    "clear_session_cookie",
    "extract_session_tokens",
    "get_cookie_name_for_role",
    "get_current_user",
    "require_admin",
    "require_admin_or_parent",
    "require_roles",
    "set_session_cookie",
]
