"""
Users module - staff accounts and admin user management.
"""

from hr_portal.modules.users.models import User, UserRole
from hr_portal.modules.users.repository import UserRepository

__all__ = ["User", "UserRole", "UserRepository"]
