"""
Seed Admin User

Creates the initial Admin account. Credentials come from the environment
so none are kept in the repository:

    SEED_ADMIN_EMAIL, SEED_ADMIN_PASSWORD (required)
    SEED_ADMIN_FIRST_NAME, SEED_ADMIN_LAST_NAME (optional)

Usage:
    SEED_ADMIN_EMAIL=admin@example.com SEED_ADMIN_PASSWORD=... \\
        python scripts/seed_admin.py
"""

import asyncio
import os
import sys
from pathlib import Path

# Add the src directory to the path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from academy.core.database import async_session_maker, close_db
from academy.core.security import hash_password
from academy.modules.users.account_ids import generate_next_account_id
from academy.modules.users.models import UserRole
from academy.modules.users.repository import UserRepository


async def seed_admin() -> None:
    """Create the admin user if no independent account uses the email."""
    email = os.environ.get("SEED_ADMIN_EMAIL", "").strip().lower()
    password = os.environ.get("SEED_ADMIN_PASSWORD", "")
    first_name = os.environ.get("SEED_ADMIN_FIRST_NAME", "Site")
    last_name = os.environ.get("SEED_ADMIN_LAST_NAME", "Admin")

    if not email or not password:
        print("SEED_ADMIN_EMAIL and SEED_ADMIN_PASSWORD must be set.")
        sys.exit(1)

    async with async_session_maker() as db:
        async with db.begin():
            existing_user = await UserRepository.get_by_email(db, email)
            if existing_user:
                print(f"Account already exists: {email}")
                print(f"  Account ID: {existing_user.account_id}")
                print(f"  Role: {existing_user.role.value}")
                return

            admin_user = await UserRepository.create(
                db,
                account_id=await generate_next_account_id(db),
                email=email,
                password_hash=hash_password(password),
                first_name=first_name,
                last_name=last_name,
                role=UserRole.ADMIN,
            )

        print("Admin created successfully!")
        print(f"  Email: {email}")
        print(f"  Name: {admin_user.full_name}")
        print(f"  Account ID: {admin_user.account_id}")

    await close_db()


if __name__ == "__main__":
    asyncio.run(seed_admin())
