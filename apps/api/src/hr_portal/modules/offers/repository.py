"""
Offers Repository

Database operations for offers, including the queries and conditional
flag updates used by the expiration sweep.
"""

from datetime import date, timedelta

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from hr_portal.modules.offers.lifecycle import NotificationStage

from .models import Offer


async def get_by_id(db: AsyncSession, offer_id: str) -> Offer | None:
    """Load an offer with its project, department and creator, bypassing the identity map."""
    result = await db.execute(
        select(Offer).where(Offer.id == offer_id).execution_options(populate_existing=True)
    )
    return result.unique().scalar_one_or_none()


async def list_all(db: AsyncSession, created_by: str | None = None) -> list[Offer]:
    """Offers, newest first, optionally restricted to one creator."""
    query = select(Offer)
    if created_by is not None:
        query = query.where(Offer.created_by == created_by)
    query = query.order_by(Offer.created_at.desc())

    result = await db.execute(query)
    return list(result.unique().scalars().all())


async def create(db: AsyncSession, **fields) -> Offer:
    offer = Offer(**fields)
    db.add(offer)
    await db.commit()
    return await get_by_id(db, offer.id)


async def update_fields(db: AsyncSession, offer: Offer, **fields) -> Offer:
    for key, value in fields.items():
        setattr(offer, key, value)
    await db.commit()
    return await get_by_id(db, offer.id)


async def delete(db: AsyncSession, offer: Offer) -> None:
    """Delete an offer. Its applications go with it (ON DELETE CASCADE)."""
    await db.delete(offer)
    await db.commit()


# ============================================
# Expiration sweep
# ============================================


def _flag_column(stage: NotificationStage):
    return getattr(Offer, stage.flag)


async def get_offers_due(
    db: AsyncSession,
    stage: NotificationStage,
    as_of: date,
) -> list[Offer]:
    """
    Offers whose ``stage`` notice has not been sent and whose deadline
    matches the stage on ``as_of``.

    TWO_DAY and ONE_DAY match the deadline exactly; EXPIRED matches every
    deadline before ``as_of``.
    """
    flag = _flag_column(stage)

    if stage is NotificationStage.EXPIRED:
        deadline_clause = Offer.deadline < as_of
    else:
        deadline_clause = Offer.deadline == as_of + timedelta(days=stage.days_before)

    result = await db.execute(
        select(Offer)
        .where(deadline_clause, or_(flag.is_(None), flag.is_(False)))
        .order_by(Offer.deadline.asc())
    )
    return list(result.unique().scalars().all())


async def mark_notified(
    db: AsyncSession,
    offer_id: str,
    stage: NotificationStage,
) -> bool:
    """
    Set the stage flag, only if it is still unset.

    Returns:
        True if this call flipped the flag, False if it was already set
    """
    flag = _flag_column(stage)

    result = await db.execute(
        update(Offer)
        .where(Offer.id == offer_id, or_(flag.is_(None), flag.is_(False)))
        .values({stage.flag: True})
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    return result.rowcount == 1
