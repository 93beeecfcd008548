"""
Applications Schemas
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from hr_portal.modules.offers.lifecycle import ArchiveWindowStatus, OfferStatus
from hr_portal.modules.offers.models import OfferType


class ApplicationSubmit(BaseModel):
    """Applicant fields of the public ``POST /apply`` form."""

    offer_id: UUID
    full_name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    tel_number: str = Field(..., min_length=1, max_length=50)
    applicant_country: str = Field(..., min_length=1, max_length=100)


class ApplicationSubmitResponse(BaseModel):
    message: str
    application_id: str


class ApplicationResponse(BaseModel):
    """Application with a download URL per filled document slot."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    offer_id: str
    offer_title: str | None = None
    offer_type: OfferType | None = None
    full_name: str
    email: str
    tel_number: str
    applicant_country: str
    created_at: datetime
    archived_at: datetime | None = None

    cv_url: str | None = None
    diplome_url: str | None = None
    id_card_url: str | None = None
    cover_letter_url: str | None = None
    declaration_sur_honneur_url: str | None = None
    fiche_de_referencement_url: str | None = None
    extrait_registre_url: str | None = None
    note_methodologique_url: str | None = None
    liste_references_url: str | None = None
    offre_financiere_url: str | None = None


class OfferApplicationsSummary(BaseModel):
    offer_id: str
    offer_title: str
    offer_type: OfferType
    offer_department: str | None = None
    offer_project: str | None = None
    deadline: date
    application_count: int
    offer_status: OfferStatus
    archive_window_status: ArchiveWindowStatus
    days_since_expiry: int


class ArchiveResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    archive_file: str = Field(..., alias="archiveFile")
    applications_count: int = Field(..., alias="applicationsCount")
