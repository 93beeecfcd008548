"""
Offers Router

Endpoints:
- GET /offers, GET /offers/{offer_id}, GET /offers/{offer_id}/tdr (public)
- POST /offers, PUT /offers/{offer_id}, DELETE /offers/{offer_id} (creator)

Create and update take multipart forms: the offer fields, an optional
``tdr`` PDF and ``notification_emails`` as a JSON array string.
"""

import logging
from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from hr_portal.core.auth import CurrentUser, require_publisher
from hr_portal.core.clock import Clock, get_clock
from hr_portal.core.database import get_db
from hr_portal.core.storage import LocalFileStore, get_file_store
from hr_portal.core.uploads import read_upload, validate_form
from hr_portal.modules.audit.schemas import MessageResponse
from hr_portal.modules.offers import service
from hr_portal.modules.offers.helpers import parse_notification_emails
from hr_portal.modules.offers.models import OfferType
from hr_portal.modules.offers.schemas import (
    OfferCreate,
    OfferDetailResponse,
    OfferResponse,
    OfferUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter()

_AUTH_RESPONSES = {
    401: {"description": "Unauthorized - invalid or missing token"},
    403: {"description": "Forbidden - not a publisher, or not the creator"},
}


@router.get(
    "/offers",
    response_model=list[OfferResponse],
    summary="List Offers",
    description="Public catalogue, newest first, with project and department names.",
)
async def list_offers(
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> list[OfferResponse]:
    return await service.list_offers(db, clock)


@router.get(
    "/offers/{offer_id}",
    response_model=OfferDetailResponse,
    summary="Get Offer",
    responses={404: {"description": "Offer not found"}},
)
async def get_offer(
    offer_id: UUID,
    db: AsyncSession = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> OfferDetailResponse:
    return await service.get_offer(db, str(offer_id), clock)


@router.get(
    "/offers/{offer_id}/tdr",
    summary="Download TDR",
    response_class=FileResponse,
    responses={404: {"description": "Offer or TDR not found"}},
)
async def download_tdr(
    offer_id: UUID,
    db: AsyncSession = Depends(get_db),
    file_store: LocalFileStore = Depends(get_file_store),
) -> FileResponse:
    filename, path = await service.get_tdr(db, str(offer_id), file_store)
    return FileResponse(
        path,
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="{filename}"'},
    )


@router.post(
    "/offers",
    response_model=OfferDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Offer",
    responses={
        400: {"description": "Invalid fields or TDR is not a PDF"},
        404: {"description": "Project not found"},
        **_AUTH_RESPONSES,
    },
)
async def create_offer(
    type: OfferType = Form(...),
    title: str = Form(...),
    country: str = Form(...),
    project_id: str = Form(...),
    reference: str = Form(...),
    deadline: date = Form(...),
    description: str | None = Form(None),
    notification_emails: str | None = Form(None),
    tdr: UploadFile | None = File(None),
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(require_publisher),
    file_store: LocalFileStore = Depends(get_file_store),
    clock: Clock = Depends(get_clock),
) -> OfferDetailResponse:
    data = validate_form(
        OfferCreate,
        type=type,
        title=title,
        description=description,
        country=country,
        project_id=project_id,
        reference=reference,
        deadline=deadline,
        notification_emails=parse_notification_emails(notification_emails),
    )
    return await service.create_offer(db, data, await read_upload(tdr), user, file_store, clock)


@router.put(
    "/offers/{offer_id}",
    response_model=OfferDetailResponse,
    summary="Update Offer",
    description="Only the provided fields change. A new TDR replaces and deletes the old one.",
    responses={
        400: {"description": "Invalid fields or TDR is not a PDF"},
        404: {"description": "Offer or project not found"},
        **_AUTH_RESPONSES,
    },
)
async def update_offer(
    offer_id: UUID,
    type: OfferType | None = Form(None),
    title: str | None = Form(None),
    country: str | None = Form(None),
    project_id: str | None = Form(None),
    reference: str | None = Form(None),
    deadline: date | None = Form(None),
    description: str | None = Form(None),
    notification_emails: str | None = Form(None),
    tdr: UploadFile | None = File(None),
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(require_publisher),
    file_store: LocalFileStore = Depends(get_file_store),
    clock: Clock = Depends(get_clock),
) -> OfferDetailResponse:
    provided = {
        "type": type,
        "title": title,
        "description": description,
        "country": country,
        "project_id": project_id,
        "reference": reference,
        "deadline": deadline,
    }
    fields = {key: value for key, value in provided.items() if value is not None}
    if notification_emails is not None:
        fields["notification_emails"] = parse_notification_emails(notification_emails)

    data = validate_form(OfferUpdate, **fields)
    return await service.update_offer(db, str(offer_id), data, await read_upload(tdr), user, file_store, clock)


@router.delete(
    "/offers/{offer_id}",
    response_model=MessageResponse,
    summary="Delete Offer",
    description="Deletes the offer, all of its applications and its TDR file.",
    responses={404: {"description": "Offer not found"}, **_AUTH_RESPONSES},
)
async def delete_offer(
    offer_id: UUID,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(require_publisher),
    file_store: LocalFileStore = Depends(get_file_store),
) -> MessageResponse:
    await service.delete_offer(db, str(offer_id), user, file_store)
    return MessageResponse(message="Offer deleted")
