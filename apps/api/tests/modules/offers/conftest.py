"""
Fixtures for offers tests.
"""

from datetime import UTC, date, datetime
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from hr_portal.modules.offers.models import Offer, OfferType


@pytest.fixture
def make_offer_model():
    """Factory for mocked Offer rows."""

    def _make(created_by: str, **overrides):
        offer = MagicMock(spec=Offer)
        offer.id = str(uuid4())
        offer.type = OfferType.CANDIDATURE
        offer.title = "Backend Developer"
        offer.description = "Build APIs"
        offer.country = "Senegal"
        offer.project_id = str(uuid4())
        offer.project_name = "Digital Services"
        offer.department_name = "IT"
        offer.reference = "REF-2025-001"
        offer.deadline = date(2025, 1, 10)
        offer.created_at = datetime(2025, 1, 2, 9, 0, tzinfo=UTC)
        offer.created_by = created_by
        offer.tdr_filename = None
        offer.tdr_filepath = None
        offer.notification_emails = ["a@x.com"]
        offer.two_day_notified = False
        offer.one_day_notified = False
        offer.deadline_notified = False

        creator = MagicMock()
        creator.name = "Hana Publisher"
        creator.email = "hr@x.com"
        offer.creator = creator

        for key, value in overrides.items():
            setattr(offer, key, value)
        return offer

    return _make
