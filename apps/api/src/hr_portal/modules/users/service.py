"""
User Management Service

Admin-only CRUD over staff accounts. Every change is written to the audit
trail as ``<admin name> (<admin email>) <action>``.
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hr_portal.core.auth import CurrentUser
from hr_portal.core.errors import ConflictError, DependencyError, NotFoundError, ValidationError
from hr_portal.core.security import hash_password
from hr_portal.modules.audit.service import log_user_action
from hr_portal.modules.users.models import User
from hr_portal.modules.users.repository import UserRepository
from hr_portal.modules.users.schemas import UserCreate, UserUpdate

logger = logging.getLogger(__name__)


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: str):
        super().__init__(f"User {user_id} not found.", error_code="USER_NOT_FOUND")


class EmailAlreadyRegisteredError(ConflictError):
    def __init__(self, email: str):
        super().__init__(
            f"A user with email {email} already exists.",
            error_code="EMAIL_ALREADY_REGISTERED",
        )


async def create_user(db: AsyncSession, data: UserCreate, actor: CurrentUser) -> User:
    """
    Create a staff account.

    Raises:
        EmailAlreadyRegisteredError: If the email is taken
    """
    if await UserRepository.email_exists(db, data.email):
        raise EmailAlreadyRegisteredError(data.email)

    try:
        user = await UserRepository.create(
            db,
            name=data.name,
            email=data.email,
            password_hash=hash_password(data.password),
            role=data.role,
        )
    except IntegrityError as e:
        await db.rollback()
        raise EmailAlreadyRegisteredError(data.email) from e

    await log_user_action(db, actor, f"created user {user.name} ({user.role.value})")
    return user


async def list_users(db: AsyncSession) -> list[User]:
    return await UserRepository.list_all(db)


async def update_user(db: AsyncSession, user_id: str, data: UserUpdate, actor: CurrentUser) -> User:
    """
    Update name, email, role and optionally the password.

    Raises:
        UserNotFoundError: If the user does not exist
        EmailAlreadyRegisteredError: If the new email belongs to another user
    """
    user = await UserRepository.get_by_id(db, user_id)
    if user is None:
        raise UserNotFoundError(user_id)

    if await UserRepository.email_exists(db, data.email, exclude_id=user.id):
        raise EmailAlreadyRegisteredError(data.email)

    fields = {"name": data.name, "email": data.email, "role": data.role}
    if data.password:
        fields["password_hash"] = hash_password(data.password)

    try:
        user = await UserRepository.update(db, user, **fields)
    except IntegrityError as e:
        await db.rollback()
        raise EmailAlreadyRegisteredError(data.email) from e

    await log_user_action(db, actor, f"updated user {user_id}")
    return user


async def delete_user(db: AsyncSession, user_id: str, actor: CurrentUser) -> None:
    """
    Delete a staff account.

    Raises:
        UserNotFoundError: If the user does not exist
        ValidationError: If an admin tries to delete their own account
        DependencyError: If the user still owns records
    """
    if str(user_id) == actor.id:
        raise ValidationError("You cannot delete your own account.", error_code="CANNOT_DELETE_SELF")

    user = await UserRepository.get_by_id(db, user_id)
    if user is None:
        raise UserNotFoundError(user_id)

    try:
        await UserRepository.delete(db, user)
    except IntegrityError as e:
        await db.rollback()
        raise DependencyError(
            "Cannot delete a user who still owns departments, projects or offers.",
            error_code="USER_HAS_RECORDS",
        ) from e

    await log_user_action(db, actor, f"deleted user {user_id}")
