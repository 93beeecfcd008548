"""Authentication module."""

from hr_portal.modules.auth.router import router
from hr_portal.modules.auth.schemas import LoginRequest, LoginResponse

__all__ = ["router", "LoginRequest", "LoginResponse"]
