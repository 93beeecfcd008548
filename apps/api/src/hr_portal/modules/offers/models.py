"""
Offer Models

Job and tender offers published under a project. The three
``*_notified`` flags record which expiration notices the daily sweep has
already sent; each only ever goes from false to true.
"""

import enum
from datetime import date

from sqlalchemy import Boolean, Date, Enum, ForeignKey, String, Text, false
from sqlalchemy.dialects.postgresql import JSON, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hr_portal.modules.organization.models import Project
from hr_portal.modules.shared import BaseModel
from hr_portal.modules.users.models import User


class OfferType(str, enum.Enum):
    """Kinds of offer. Every type except CANDIDATURE is a tender."""

    CANDIDATURE = "candidature"
    MANIFESTATION = "manifestation"
    APPEL_D_OFFRE_SERVICE = "appel_d_offre_service"
    APPEL_D_OFFRE_EQUIPEMENT = "appel_d_offre_equipement"
    CONSULTATION = "consultation"


class Offer(BaseModel):
    __tablename__ = "offers"

    type: Mapped[OfferType] = mapped_column(
        Enum(OfferType, name="offer_type", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    country: Mapped[str] = mapped_column(String(100), nullable=False)
    reference: Mapped[str] = mapped_column(String(100), nullable=False)
    deadline: Mapped[date] = mapped_column(Date, nullable=False, index=True)

    project_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("projects.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    created_by: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    # Terms of reference document (optional PDF)
    tdr_filename: Mapped[str | None] = mapped_column(String(255), nullable=True)
    tdr_filepath: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Extra recipients of expiration notices (at most 10)
    notification_emails: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)

    # Expiration notice idempotency flags
    two_day_notified: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    one_day_notified: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    deadline_notified: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )

    project: Mapped[Project] = relationship(Project, lazy="joined")
    creator: Mapped[User] = relationship(User, lazy="joined")

    @property
    def department_name(self) -> str | None:
        if self.project is None or self.project.department is None:
            return None
        return self.project.department.name

    @property
    def project_name(self) -> str | None:
        return self.project.name if self.project is not None else None

    def __repr__(self) -> str:
        return f"<Offer(id={self.id}, title={self.title}, deadline={self.deadline})>"
