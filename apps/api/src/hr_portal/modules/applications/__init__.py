"""Applications module - public submission, staff review and archive bundles."""

from hr_portal.modules.applications.documents import DocumentType
from hr_portal.modules.applications.models import Application

__all__ = ["Application", "DocumentType"]
