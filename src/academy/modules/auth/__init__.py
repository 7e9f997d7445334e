"""Authentication module."""

from academy.modules.auth.router import router
from academy.modules.auth.schemas import LoginRequest, LoginResponse

__all__ = ["router", "LoginRequest", "LoginResponse"]
