"""Authentication schemas."""

from pydantic import EmailStr, Field

from academy.modules.shared import CamelModel
from academy.modules.users.schemas import UserResponse


class LoginRequest(CamelModel):
    """Login request schema."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class LoginResponse(CamelModel):
    """
    Login response schema.

    The token is also set in the role's session cookie; it is returned in
    the body for clients using bearer authentication.
    """

    message: str = "Login successful."
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class LogoutResponse(CamelModel):
    message: str = "Logged out successfully."
