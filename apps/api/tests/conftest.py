"""
Shared fixtures: mocked database session, staff users and a pinned clock.
"""

from datetime import date
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from hr_portal.core.auth import ROLE_ADMIN, ROLE_PUBLISHER, ROLE_REVIEWER, CurrentUser


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.refresh = AsyncMock()
    db.get = AsyncMock()
    db.execute = AsyncMock()
    db.delete = AsyncMock()
    db.add = MagicMock()
    return db


@pytest.fixture
def admin_user():
    return CurrentUser(id=str(uuid4()), email="admin@hr.test", role=ROLE_ADMIN, name="Ada Admin")


@pytest.fixture
def publisher():
    return CurrentUser(id=str(uuid4()), email="hr@x.com", role=ROLE_PUBLISHER, name="Hana Publisher")


@pytest.fixture
def other_publisher():
    return CurrentUser(id=str(uuid4()), email="other@x.com", role=ROLE_PUBLISHER, name="Omar Publisher")


@pytest.fixture
def reviewer():
    return CurrentUser(id=str(uuid4()), email="review@x.com", role=ROLE_REVIEWER, name="Rita Reviewer")


@pytest.fixture
def clock():
    """Clock pinned to 2025-01-08."""
    fixed = MagicMock()
    fixed.today.return_value = date(2025, 1, 8)
    return fixed
