"""
Authentication and Authorization Module

FastAPI dependencies that validate the bearer JWT issued by POST /login
and enforce role-based access.

Roles:
- admin: user management, audit log, test email
- comite_ajout: publishes offers under its own departments and projects
- comite_ouverture: reviews and archives applications of every offer
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from hr_portal.core.security import decode_token

logger = logging.getLogger(__name__)

ROLE_ADMIN = "admin"
ROLE_PUBLISHER = "comite_ajout"
ROLE_REVIEWER = "comite_ouverture"

# auto_error=False so a missing header yields 401 instead of FastAPI's 403
security = HTTPBearer(
    auto_error=False,
    description="JWT Bearer token for authentication",
)


@dataclass
class CurrentUser:
    """
    Represents an authenticated user.

    Populated from JWT claims after token validation.
    """

    id: str
    email: str
    role: str
    name: str

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    @property
    def is_publisher(self) -> bool:
        return self.role == ROLE_PUBLISHER

    @property
    def is_reviewer(self) -> bool:
        return self.role == ROLE_REVIEWER

    @property
    def label(self) -> str:
        """``Name (email)`` as used in audit log messages."""
        return f"{self.name} ({self.email})"

    def __str__(self) -> str:
        return f"CurrentUser(id={self.id}, email={self.email}, role={self.role})"


def _unauthorized(error: str, message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"error": error, "message": message},
        headers={"WWW-Authenticate": "Bearer"},
    )


def _user_from_token(token: str) -> CurrentUser:
    """
    Validate a JWT and extract the user claims.

    Raises:
        HTTPException 401: If the token is invalid, expired or lacks claims
    """
    payload = decode_token(token)

    if payload is None:
        raise _unauthorized("INVALID_TOKEN", "Invalid or expired authentication token.")

    if payload.get("type", "access") != "access":
        logger.warning(f"Invalid token type: {payload.get('type')}")
        raise _unauthorized("INVALID_TOKEN_TYPE", "This endpoint requires an access token.")

    user_id = payload.get("sub")
    role = payload.get("role")
    if not user_id or not role:
        logger.warning("Token missing 'sub' or 'role' claim")
        raise _unauthorized("INVALID_TOKEN_CLAIMS", "Token contains invalid or missing claims.")

    return CurrentUser(
        id=str(user_id),
        email=payload.get("email", ""),
        role=role,
        name=payload.get("name", ""),
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> CurrentUser:
    """
    FastAPI dependency returning the authenticated user.

    Raises:
        HTTPException 401: If the token is missing, invalid, or expired
    """
    if credentials is None or not credentials.credentials:
        raise _unauthorized("MISSING_TOKEN", "No token provided.")

    user = _user_from_token(credentials.credentials)
    logger.debug(f"Authenticated user: {user.id} ({user.role})")
    return user


def require_roles(*roles: str) -> Callable[..., Awaitable[CurrentUser]]:
    """
    Build a dependency that only admits users holding one of ``roles``.

    Usage:
        @router.get("/logs")
        async def list_logs(user: CurrentUser = Depends(require_roles(ROLE_ADMIN))):
            ...

    Raises:
        HTTPException 401: If not authenticated
        HTTPException 403: If the user's role is not allowed
    """
    allowed = set(roles)

    async def dependency(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if user.role not in allowed:
            logger.warning(
                f"Access denied: User {user.id} ({user.email}) has role '{user.role}', "
                f"requires one of {sorted(allowed)}"
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail={
                    "error": "FORBIDDEN",
                    "message": "You do not have permission to access this resource.",
                },
            )
        return user

    return dependency


require_admin = require_roles(ROLE_ADMIN)
require_publisher = require_roles(ROLE_PUBLISHER)
require_staff = require_roles(ROLE_PUBLISHER, ROLE_REVIEWER)


__all__ = [
    "CurrentUser",
    "ROLE_ADMIN",
    "ROLE_PUBLISHER",
    "ROLE_REVIEWER",
    "get_current_user",
    "require_roles",
    "require_admin",
    "require_publisher",
    "require_staff",
]
