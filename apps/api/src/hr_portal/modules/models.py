"""
Model registry.

Imports every model so that Base.metadata is complete for ``init_db`` and
Alembic autogenerate.
"""

from hr_portal.modules.applications.models import Application
from hr_portal.modules.audit.models import AuditLog
from hr_portal.modules.offers.models import Offer, OfferType
from hr_portal.modules.organization.models import Department, Project
from hr_portal.modules.users.models import User, UserRole

__all__ = [
    "Application",
    "AuditLog",
    "Department",
    "Offer",
    "OfferType",
    "Project",
    "User",
    "UserRole",
]
