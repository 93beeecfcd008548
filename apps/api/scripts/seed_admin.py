"""
Seed Admin User

Creates the first admin account of the HR portal. Every other account is
created by an admin through POST /users.

Credentials come from the command line or the environment:
    ADMIN_NAME, ADMIN_EMAIL, ADMIN_PASSWORD

Usage:
    cd apps/api
    python scripts/seed_admin.py --email admin@example.org --name "HR Admin"
"""

import argparse
import asyncio
import getpass
import os
import sys
from pathlib import Path

# Add the src directory to the path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from hr_portal.core.config import settings
from hr_portal.core.security import hash_password
from hr_portal.modules import models  # noqa: F401 - registers every mapper
from hr_portal.modules.users.models import User, UserRole


async def seed_admin(name: str, email: str, password: str) -> None:
    """Create the admin user if it doesn't exist."""

    # Create async engine and session
    engine = create_async_engine(settings.database_url, echo=False)
    async_session = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with async_session() as db:
        # Check if user already exists
        result = await db.execute(select(User).where(func.lower(User.email) == email.lower()))
        existing_user = result.scalar_one_or_none()

        if existing_user:
            print(f"User already exists: {email}")
            print(f"  ID: {existing_user.id}")
            print(f"  Role: {existing_user.role.value}")
            await engine.dispose()
            return

        admin_user = User(
            name=name,
            email=email.lower(),
            password_hash=hash_password(password),
            role=UserRole.ADMIN,
        )

        db.add(admin_user)
        await db.commit()
        await db.refresh(admin_user)

        print("Admin created successfully!")
        print(f"  Email: {admin_user.email}")
        print(f"  Name: {admin_user.name}")
        print(f"  ID: {admin_user.id}")

    await engine.dispose()


def main() -> None:
    parser = argparse.ArgumentParser(description="Create the first HR portal admin.")
    parser.add_argument("--name", default=os.getenv("ADMIN_NAME", "Administrator"))
    parser.add_argument("--email", default=os.getenv("ADMIN_EMAIL"))
    args = parser.parse_args()

    if not args.email:
        parser.error("--email or ADMIN_EMAIL is required")

    password = os.getenv("ADMIN_PASSWORD") or getpass.getpass("Admin password: ")
    if len(password) < 8:
        parser.error("password must be at least 8 characters")

    asyncio.run(seed_admin(args.name, args.email, password))


if __name__ == "__main__":
    main()
