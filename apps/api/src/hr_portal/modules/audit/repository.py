"""
Audit Log Repository
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import AuditLog


async def create(db: AsyncSession, message: str) -> AuditLog:
    """Insert an audit message and commit."""
    entry = AuditLog(message=message)
    db.add(entry)
    await db.commit()
    return entry


async def list_recent(db: AsyncSession, limit: int = 500) -> list[AuditLog]:
    """Audit messages, newest first."""
    result = await db.execute(
        select(AuditLog).order_by(AuditLog.created_at.desc()).limit(limit)
    )
    return list(result.scalars().all())
