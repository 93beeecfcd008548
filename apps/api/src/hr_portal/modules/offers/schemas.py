"""
Offers Schemas

Offers are created and updated through multipart forms (the TDR is an
optional file part); the router collects the form fields into these models.
"""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from hr_portal.modules.offers.lifecycle import ArchiveWindowStatus, OfferStatus
from hr_portal.modules.offers.models import OfferType


class OfferCreate(BaseModel):
    type: OfferType
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=20000)
    country: str = Field(..., min_length=1, max_length=100)
    project_id: UUID
    reference: str = Field(..., min_length=1, max_length=100)
    deadline: date
    notification_emails: list[str] = Field(default_factory=list)


class OfferUpdate(BaseModel):
    """Partial update: only the provided fields change."""

    type: OfferType | None = None
    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, max_length=20000)
    country: str | None = Field(None, min_length=1, max_length=100)
    project_id: UUID | None = None
    reference: str | None = Field(None, min_length=1, max_length=100)
    deadline: date | None = None
    notification_emails: list[str] | None = None


class OfferResponse(BaseModel):
    """Public offer listing entry."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    type: OfferType
    title: str
    description: str | None
    country: str
    project_id: str
    project_name: str | None = None
    department_name: str | None = None
    reference: str
    deadline: date
    created_at: datetime
    tdr_filename: str | None = None
    tdr_url: str | None = None
    offer_status: OfferStatus | None = None


class OfferDetailResponse(OfferResponse):
    notification_emails: list[str] = Field(default_factory=list)
    created_by: str
    created_by_name: str | None = None
    created_by_email: str | None = None
    archive_window_status: ArchiveWindowStatus
