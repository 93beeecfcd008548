"""Authentication router."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from hr_portal.core.config import settings
from hr_portal.core.database import get_db
from hr_portal.core.rate_limit import rate_limiter
from hr_portal.core.security import create_access_token, verify_password
from hr_portal.modules.auth.schemas import LoginRequest, LoginResponse, LoginUser
from hr_portal.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)

router = APIRouter()

_INVALID_CREDENTIALS = {
    "error": "INVALID_CREDENTIALS",
    "message": "Invalid email or password.",
}


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Log In",
    description="Exchange email and password for a bearer token valid for one hour.",
    dependencies=[
        Depends(
            rate_limiter(
                "login",
                settings.login_rate_limit,
                settings.login_rate_window_seconds,
            )
        )
    ],
    responses={
        401: {
            "description": "Invalid credentials",
            "content": {"application/json": {"example": {"detail": _INVALID_CREDENTIALS}}},
        },
        429: {"description": "Too many login attempts"},
    },
)
async def login(
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
) -> LoginResponse:
    """
    Authenticate user and return a JWT.

    Raises:
        HTTPException 401: Invalid credentials
    """
    user = await UserRepository.get_by_email(db, credentials.email)

    if not user:
        logger.warning(f"Login attempt for non-existent email: {credentials.email}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=_INVALID_CREDENTIALS)

    if not verify_password(credentials.password, user.password_hash):
        logger.warning(f"Invalid password for user: {credentials.email}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=_INVALID_CREDENTIALS)

    token = create_access_token(
        subject=str(user.id),
        additional_claims={
            "name": user.name,
            "email": user.email,
            "role": user.role.value,
        },
    )

    logger.info(f"User logged in: {user.email} (role: {user.role.value})")

    return LoginResponse(
        token=token,
        expires_in=settings.access_token_expire_minutes * 60,
        user=LoginUser(
            id=str(user.id),
            name=user.name,
            email=user.email,
            role=user.role.value,
        ),
    )
