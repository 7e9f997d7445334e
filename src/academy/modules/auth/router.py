"""Authentication router."""

import logging

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.auth import clear_session_cookie, get_current_user, set_session_cookie
from academy.core.config import settings
from academy.core.database import get_db
from academy.core.rate_limit import rate_limit
from academy.modules.auth.schemas import LoginRequest, LoginResponse, LogoutResponse
from academy.modules.auth.service import authenticate, create_session_token
from academy.modules.users.models import User
from academy.modules.users.schemas import UserResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
@rate_limit(
    limit=lambda: settings.login_rate_limit,
    window_seconds=lambda: settings.login_rate_limit_window_seconds,
)
async def login(
    request: Request,
    response: Response,
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> LoginResponse:
    """
    Authenticate a user and open a session.

    The token is stored in the cookie named for the user's role and is
    also returned in the body.

    Raises:
        401: Invalid credentials
        403: Dependent account, or account inactive
        429: Too many attempts from this client
    """
    user = await authenticate(db, credentials.email, credentials.password)
    token = create_session_token(user)
    set_session_cookie(response, user.role, token)

    return LoginResponse(
        access_token=token,
        user=UserResponse.model_validate(user),
    )


@router.post("/logout", response_model=LogoutResponse)
async def logout(
    response: Response,
    user: User = Depends(get_current_user),
) -> LogoutResponse:
    """Clear the caller's session channel. The token itself stays valid until expiry."""
    cookie_name = clear_session_cookie(response, user.role)
    logger.info(f"User logged out: {user.account_id} ({cookie_name})")
    return LogoutResponse()


@router.get("/me", response_model=UserResponse)
async def me(user: User = Depends(get_current_user)) -> UserResponse:
    """Return the authenticated account."""
    return UserResponse.model_validate(user)
