"""
Ownership Rules

Publishers (comite_ajout) only see and change records they created.
Reviewers (comite_ouverture) see the applications of every offer.
"""

import logging

from hr_portal.core.auth import CurrentUser
from hr_portal.core.errors import ForbiddenError

logger = logging.getLogger(__name__)


def is_owner(user: CurrentUser, created_by: str | None) -> bool:
    return created_by is not None and str(created_by) == str(user.id)


def ensure_owner(user: CurrentUser, created_by: str | None, resource: str) -> None:
    """
    Raise ForbiddenError unless ``user`` created the resource.

    Args:
        user: Authenticated user
        created_by: ``created_by`` column of the resource
        resource: Human-readable resource name for the error message
    """
    if not is_owner(user, created_by):
        logger.warning(f"Ownership check failed: {user} on {resource} owned by {created_by}")
        raise ForbiddenError(
            f"{resource} not found or access denied.",
            error_code="NOT_OWNER",
        )


def can_access_offer_applications(user: CurrentUser, offer_created_by: str | None) -> bool:
    """Reviewers may access every offer; publishers only their own."""
    if user.is_reviewer:
        return True
    if user.is_publisher:
        return is_owner(user, offer_created_by)
    return False


def ensure_offer_applications_access(user: CurrentUser, offer_created_by: str | None) -> None:
    if not can_access_offer_applications(user, offer_created_by):
        logger.warning(f"Application access denied: {user} on offer owned by {offer_created_by}")
        raise ForbiddenError(
            "You are not allowed to access applications for this offer.",
            error_code="NOT_OWNER",
        )


def applications_scope(user: CurrentUser) -> str | None:
    """
    Creator filter for application listings.

    Returns None for reviewers (no filter) and the user ID for publishers.
    """
    return None if user.is_reviewer else user.id
