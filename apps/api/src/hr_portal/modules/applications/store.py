"""
SQLAlchemy-backed archive store.

Adapts the offers and applications repositories to the ArchiveStore
protocol used by ApplicationArchiver.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from hr_portal.modules.applications import repository
from hr_portal.modules.applications.archive import ArchiveApplicant, ArchiveOffer, applicant_documents
from hr_portal.modules.offers import repository as offers_repository


class SqlArchiveStore:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_offer(self, offer_id: str) -> ArchiveOffer | None:
        offer = await offers_repository.get_by_id(self.db, offer_id)
        if offer is None:
            return None
        return ArchiveOffer(
            id=str(offer.id),
            title=offer.title,
            type=offer.type.value,
            deadline=offer.deadline,
            created_by=str(offer.created_by),
            department_name=offer.department_name,
        )

    async def get_unarchived_applications(self, offer_id: str) -> list[ArchiveApplicant]:
        applications = await repository.list_unarchived_for_offer(self.db, offer_id)
        return [
            ArchiveApplicant(
                id=str(a.id),
                full_name=a.full_name,
                email=a.email,
                tel_number=a.tel_number,
                applicant_country=a.applicant_country,
                created_at=a.created_at,
                documents=applicant_documents(a),
            )
            for a in applications
        ]
