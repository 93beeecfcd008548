"""
Application Models

One row per (offer, applicant email). Each of the ten document slots is a
filename + stored path pair; tender-only slots stay NULL for candidatures.
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hr_portal.modules.offers.models import Offer
from hr_portal.modules.shared import BaseModel


class Application(BaseModel):
    __tablename__ = "applications"
    __table_args__ = (UniqueConstraint("offer_id", "email", name="uq_applications_offer_email"),)

    offer_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("offers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    tel_number: Mapped[str] = mapped_column(String(50), nullable=False)
    applicant_country: Mapped[str] = mapped_column(String(100), nullable=False)

    # Base documents
    cv_filename: Mapped[str | None] = mapped_column(String(255), nullable=True)
    cv_filepath: Mapped[str | None] = mapped_column(String(500), nullable=True)
    diplome_filename: Mapped[str | None] = mapped_column(String(255), nullable=True)
    diplome_filepath: Mapped[str | None] = mapped_column(String(500), nullable=True)
    id_card_filename: Mapped[str | None] = mapped_column(String(255), nullable=True)
    id_card_filepath: Mapped[str | None] = mapped_column(String(500), nullable=True)
    cover_letter_filename: Mapped[str | None] = mapped_column(String(255), nullable=True)
    cover_letter_filepath: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Tender documents
    declaration_sur_honneur_filename: Mapped[str | None] = mapped_column(String(255), nullable=True)
    declaration_sur_honneur_filepath: Mapped[str | None] = mapped_column(String(500), nullable=True)
    fiche_de_referencement_filename: Mapped[str | None] = mapped_column(String(255), nullable=True)
    fiche_de_referencement_filepath: Mapped[str | None] = mapped_column(String(500), nullable=True)
    extrait_registre_filename: Mapped[str | None] = mapped_column(String(255), nullable=True)
    extrait_registre_filepath: Mapped[str | None] = mapped_column(String(500), nullable=True)
    note_methodologique_filename: Mapped[str | None] = mapped_column(String(255), nullable=True)
    note_methodologique_filepath: Mapped[str | None] = mapped_column(String(500), nullable=True)
    liste_references_filename: Mapped[str | None] = mapped_column(String(255), nullable=True)
    liste_references_filepath: Mapped[str | None] = mapped_column(String(500), nullable=True)
    offre_financiere_filename: Mapped[str | None] = mapped_column(String(255), nullable=True)
    offre_financiere_filepath: Mapped[str | None] = mapped_column(String(500), nullable=True)

    archived_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    offer: Mapped[Offer] = relationship(Offer, lazy="joined")

    def __repr__(self) -> str:
        return f"<Application(id={self.id}, offer_id={self.offer_id}, email={self.email})>"
