"""Audit module - append-only action log and admin tools."""

from hr_portal.modules.audit.models import AuditLog
from hr_portal.modules.audit.service import SqlAuditTrail, log_action, log_user_action

__all__ = ["AuditLog", "SqlAuditTrail", "log_action", "log_user_action"]
