"""
SQLAlchemy-backed lifecycle store.

Adapts the offers repository to the LifecycleStore protocol. A database
error rolls the session back before it propagates, so the next stage of
the sweep starts on a usable session.
"""

from datetime import date

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hr_portal.modules.offers import repository
from hr_portal.modules.offers.lifecycle import NotificationStage, OfferNotice
from hr_portal.modules.offers.models import Offer


def to_notice(offer: Offer) -> OfferNotice:
    return OfferNotice(
        offer_id=str(offer.id),
        title=offer.title,
        deadline=offer.deadline,
        creator_email=offer.creator.email if offer.creator else None,
        creator_name=offer.creator.name if offer.creator else None,
        notification_emails=list(offer.notification_emails or []),
    )


class SqlLifecycleStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_due_offers(self, stage: NotificationStage, as_of: date) -> list[OfferNotice]:
        try:
            offers = await repository.get_offers_due(self.db, stage, as_of)
        except SQLAlchemyError:
            await self.db.rollback()
            raise
        return [to_notice(offer) for offer in offers]

    async def mark_notified(self, offer_id: str, stage: NotificationStage) -> bool:
        try:
            return await repository.mark_notified(self.db, offer_id, stage)
        except SQLAlchemyError:
            await self.db.rollback()
            raise
