"""
Applications Repository
"""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hr_portal.modules.offers.models import Offer

from .models import Application


async def get_by_id(db: AsyncSession, application_id: str) -> Application | None:
    result = await db.execute(
        select(Application)
        .where(Application.id == application_id)
        .execution_options(populate_existing=True)
    )
    return result.unique().scalar_one_or_none()


async def find_by_offer_and_email(db: AsyncSession, offer_id: str, email: str) -> Application | None:
    """Case-insensitive lookup of an existing application to ``offer_id``."""
    result = await db.execute(
        select(Application).where(
            Application.offer_id == offer_id,
            func.lower(Application.email) == email.lower(),
        )
    )
    return result.unique().scalars().first()


async def create(db: AsyncSession, **fields) -> Application:
    application = Application(**fields)
    db.add(application)
    await db.commit()
    return await get_by_id(db, application.id)


async def list_all(db: AsyncSession, created_by: str | None = None) -> list[Application]:
    """
    Applications, newest first.

    Args:
        created_by: Only applications to offers created by this user
    """
    query = select(Application)
    if created_by is not None:
        query = query.join(Application.offer).where(Offer.created_by == created_by)
    query = query.order_by(Application.created_at.desc())

    result = await db.execute(query)
    return list(result.unique().scalars().all())


async def list_unarchived_for_offer(db: AsyncSession, offer_id: str) -> list[Application]:
    result = await db.execute(
        select(Application)
        .where(Application.offer_id == offer_id, Application.archived_at.is_(None))
        .order_by(Application.created_at.asc())
    )
    return list(result.unique().scalars().all())


async def offer_summaries(db: AsyncSession, created_by: str | None = None) -> list[tuple[Offer, int]]:
    """
    Every offer (optionally one creator's) with its application count,
    earliest deadline first.
    """
    counts = (
        select(
            Application.offer_id.label("offer_id"),
            func.count(Application.id).label("application_count"),
        )
        .group_by(Application.offer_id)
        .subquery()
    )

    query = select(Offer, func.coalesce(counts.c.application_count, 0)).outerjoin(
        counts, counts.c.offer_id == Offer.id
    )
    if created_by is not None:
        query = query.where(Offer.created_by == created_by)
    query = query.order_by(Offer.deadline.asc(), Offer.created_at.asc())

    result = await db.execute(query)
    return [(offer, int(count)) for offer, count in result.unique().all()]
