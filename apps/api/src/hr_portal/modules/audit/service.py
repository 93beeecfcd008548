"""
Audit Trail Service

Audit writes are best-effort: a failure to record a message is logged and
never fails the operation being audited.
"""

import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hr_portal.core.auth import CurrentUser
from hr_portal.core.email import render_test_email, send_email
from hr_portal.modules.audit import repository

logger = logging.getLogger(__name__)


async def log_action(db: AsyncSession, message: str) -> bool:
    """
    Append ``message`` to the audit trail.

    Returns:
        True if the message was stored
    """
    try:
        await repository.create(db, message)
        return True
    except SQLAlchemyError as e:
        logger.error(f"Failed to write audit log entry {message!r}: {e}")
        await db.rollback()
        return False


async def log_user_action(db: AsyncSession, user: CurrentUser, action: str) -> bool:
    """Audit ``<name> (<email>) <action>``."""
    return await log_action(db, f"{user.label} {action}")


class SqlAuditTrail:
    """Audit sink used by the lifecycle and archive engines."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def record(self, message: str) -> None:
        await log_action(self.db, message)


async def list_logs(db: AsyncSession) -> list:
    return await repository.list_recent(db)


async def send_test_email(
    db: AsyncSession,
    to: str,
    subject: str,
    message: str,
    user: CurrentUser,
    sent_at: datetime,
) -> bool:
    """
    Send an admin test email and audit it.

    Returns:
        True if the email provider accepted it
    """
    sent = await send_email(
        to_email=to,
        subject=subject,
        html_content=render_test_email(message, user.label, sent_at.strftime("%Y-%m-%d %H:%M:%S %Z")),
    )
    if sent:
        await log_user_action(db, user, f"sent test email to {to}")
    else:
        logger.warning(f"Test email from {user} to {to} was not sent")
    return sent
