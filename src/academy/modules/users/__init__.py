"""
Users module - accounts, guardianship and registration.
"""

from academy.modules.users.models import User, UserRole
from academy.modules.users.repository import UserRepository

__all__ = ["User", "UserRole", "UserRepository"]
