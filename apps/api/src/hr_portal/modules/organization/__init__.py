"""Organization module - departments and projects owned by publishers."""

from hr_portal.modules.organization.models import Department, Project

__all__ = ["Department", "Project"]
