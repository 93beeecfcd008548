"""
Core module - Configuration, database, security, and shared services.
"""

from hr_portal.core.config import get_settings, settings
from hr_portal.core.database import Base, close_db, get_db, init_db
from hr_portal.core.errors import PortalError
from hr_portal.core.redis import close_redis, get_redis, init_redis
from hr_portal.core.security import (
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)

__all__ = [
    # Config
    "settings",
    "get_settings",
    # Database
    "Base",
    "get_db",
    "init_db",
    "close_db",
    # Errors
    "PortalError",
    # Redis
    "get_redis",
    "init_redis",
    "close_redis",
    # Security
    "create_access_token",
    "decode_token",
    "hash_password",
    "verify_password",
]
