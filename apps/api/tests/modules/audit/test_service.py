"""
Unit tests for the audit trail and the admin test email.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.exc import OperationalError

from hr_portal.modules.audit.service import SqlAuditTrail, log_action, log_user_action, send_test_email

SERVICE = "hr_portal.modules.audit.service"


class TestLogAction:
    """Tests for log_action."""

    @pytest.mark.asyncio
    async def test_stores_message(self, mock_db):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.create = AsyncMock()

            assert await log_action(mock_db, "hello") is True
            mock_repo.create.assert_awaited_once_with(mock_db, "hello")

    @pytest.mark.asyncio
    async def test_failure_is_swallowed(self, mock_db):
        """A broken audit write never fails the audited operation."""
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.create = AsyncMock(side_effect=OperationalError("insert", {}, Exception("down")))

            assert await log_action(mock_db, "hello") is False
            mock_db.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_user_action_prefix(self, mock_db, admin_user):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.create = AsyncMock()

            await log_user_action(mock_db, admin_user, "deleted user 42")

            mock_repo.create.assert_awaited_once_with(mock_db, "Ada Admin (admin@hr.test) deleted user 42")

    @pytest.mark.asyncio
    async def test_sql_audit_trail(self, mock_db):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.create = AsyncMock()

            await SqlAuditTrail(mock_db).record("sweep done")

            mock_repo.create.assert_awaited_once_with(mock_db, "sweep done")


class TestSendTestEmail:
    """Tests for send_test_email."""

    @pytest.mark.asyncio
    async def test_sent_is_audited(self, mock_db, admin_user):
        sent_at = datetime(2025, 1, 8, 9, 30, tzinfo=UTC)

        with (
            patch(f"{SERVICE}.send_email", new_callable=AsyncMock) as mock_send,
            patch(f"{SERVICE}.log_user_action", new_callable=AsyncMock) as mock_audit,
        ):
            mock_send.return_value = True

            assert await send_test_email(mock_db, "ops@x.com", "Ping", "Hello <b>", admin_user, sent_at)

            html = mock_send.call_args.kwargs["html_content"]
            assert "Hello &lt;b&gt;" in html
            assert "2025-01-08 09:30:00" in html
            mock_audit.assert_awaited_once_with(mock_db, admin_user, "sent test email to ops@x.com")

    @pytest.mark.asyncio
    async def test_failed_send_not_audited(self, mock_db, admin_user):
        with (
            patch(f"{SERVICE}.send_email", new_callable=AsyncMock) as mock_send,
            patch(f"{SERVICE}.log_user_action", new_callable=AsyncMock) as mock_audit,
        ):
            mock_send.return_value = False

            assert not await send_test_email(mock_db, "ops@x.com", "Ping", "Hi", admin_user, datetime.now(UTC))
            mock_audit.assert_not_called()
