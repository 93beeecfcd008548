"""
Unit tests for ownership and application-visibility rules.
"""

import pytest

from hr_portal.core.errors import ForbiddenError
from hr_portal.core.permissions import (
    applications_scope,
    can_access_offer_applications,
    ensure_offer_applications_access,
    ensure_owner,
    is_owner,
)


class TestOwnership:
    """Tests for is_owner / ensure_owner."""

    def test_creator_is_owner(self, publisher):
        assert is_owner(publisher, publisher.id) is True

    def test_other_user_is_not_owner(self, publisher, other_publisher):
        assert is_owner(publisher, other_publisher.id) is False

    def test_missing_creator_is_not_owned(self, publisher):
        assert is_owner(publisher, None) is False

    def test_ensure_owner_raises_for_other_publisher(self, publisher, other_publisher):
        """Another publisher's resource is forbidden, with the resource named."""
        with pytest.raises(ForbiddenError) as exc_info:
            ensure_owner(publisher, other_publisher.id, "Offer")
        assert exc_info.value.status_code == 403
        assert exc_info.value.error_code == "NOT_OWNER"
        assert "Offer" in exc_info.value.message


class TestOfferApplicationsAccess:
    """Publishers see their own offers' applications, reviewers see all."""

    def test_reviewer_sees_every_offer(self, reviewer, publisher):
        assert can_access_offer_applications(reviewer, publisher.id) is True

    def test_publisher_sees_own_offer(self, publisher):
        assert can_access_offer_applications(publisher, publisher.id) is True

    def test_publisher_denied_other_offer(self, publisher, other_publisher):
        assert can_access_offer_applications(publisher, other_publisher.id) is False
        with pytest.raises(ForbiddenError):
            ensure_offer_applications_access(publisher, other_publisher.id)

    def test_admin_denied(self, admin_user, publisher):
        """Admins manage users, not applications."""
        assert can_access_offer_applications(admin_user, publisher.id) is False

    def test_scope(self, reviewer, publisher):
        """Reviewers are unfiltered, publishers are filtered to themselves."""
        assert applications_scope(reviewer) is None
        assert applications_scope(publisher) == publisher.id
