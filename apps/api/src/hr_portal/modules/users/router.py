"""
Users Router

Admin-only management of staff accounts.

Endpoints:
- POST /users - Create a user
- GET /users - List users
- PUT /users/{user_id} - Update a user
- DELETE /users/{user_id} - Delete a user
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from hr_portal.core.auth import CurrentUser, require_admin
from hr_portal.core.database import get_db
from hr_portal.modules.audit.schemas import MessageResponse
from hr_portal.modules.users import service
from hr_portal.modules.users.schemas import UserCreate, UserResponse, UserUpdate

logger = logging.getLogger(__name__)

router = APIRouter()

_AUTH_RESPONSES = {
    401: {"description": "Unauthorized - invalid or missing token"},
    403: {"description": "Forbidden - admin role required"},
}


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create User",
    description="Create a staff account with one of the roles `admin`, `comite_ajout` or `comite_ouverture`.",
    responses={
        400: {
            "description": "Invalid data or email already registered",
            "content": {
                "application/json": {
                    "example": {
                        "detail": {
                            "error": "EMAIL_ALREADY_REGISTERED",
                            "message": "A user with email hr@example.com already exists.",
                        }
                    }
                }
            },
        },
        **_AUTH_RESPONSES,
    },
)
async def create_user(
    data: UserCreate,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(require_admin),
) -> UserResponse:
    user = await service.create_user(db, data, admin)
    logger.info(f"Admin {admin.id} created user {user.id}")
    return UserResponse.model_validate(user)


@router.get(
    "",
    response_model=list[UserResponse],
    summary="List Users",
    responses=_AUTH_RESPONSES,
)
async def list_users(
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(require_admin),
) -> list[UserResponse]:
    users = await service.list_users(db)
    return [UserResponse.model_validate(user) for user in users]


@router.put(
    "/{user_id}",
    response_model=UserResponse,
    summary="Update User",
    description="Update name, email and role. The password is only changed when provided.",
    responses={
        404: {"description": "User not found"},
        **_AUTH_RESPONSES,
    },
)
async def update_user(
    user_id: UUID,
    data: UserUpdate,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(require_admin),
) -> UserResponse:
    user = await service.update_user(db, str(user_id), data, admin)
    return UserResponse.model_validate(user)


@router.delete(
    "/{user_id}",
    response_model=MessageResponse,
    summary="Delete User",
    responses={
        400: {"description": "Own account, or the user still owns records"},
        404: {"description": "User not found"},
        **_AUTH_RESPONSES,
    },
)
async def delete_user(
    user_id: UUID,
    db: AsyncSession = Depends(get_db),
    admin: CurrentUser = Depends(require_admin),
) -> MessageResponse:
    await service.delete_user(db, str(user_id), admin)
    return MessageResponse(message="User deleted")
