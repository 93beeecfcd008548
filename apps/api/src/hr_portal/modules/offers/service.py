"""
Offers Service

Public offer catalogue and publisher-side offer management.

Rules:
- Anyone can list and read offers and download their TDR
- Only publishers create offers, under one of their own projects
- Only the creator of an offer can update or delete it
- The TDR (terms of reference) must be a PDF; replacing it deletes the
  previous file, deleting the offer deletes it too
"""

import logging
from datetime import date
from pathlib import Path

from sqlalchemy.ext.asyncio import AsyncSession

from hr_portal.core.auth import CurrentUser
from hr_portal.core.clock import Clock
from hr_portal.core.errors import NotFoundError, ValidationError
from hr_portal.core.permissions import ensure_owner
from hr_portal.core.storage import LocalFileStore, sanitize_name, unique_suffix
from hr_portal.core.uploads import UploadedFile
from hr_portal.modules.audit.service import log_user_action
from hr_portal.modules.offers import repository
from hr_portal.modules.offers.helpers import clean_notification_emails
from hr_portal.modules.offers.lifecycle import get_archive_window_status, get_offer_status
from hr_portal.modules.offers.models import Offer
from hr_portal.modules.offers.schemas import (
    OfferCreate,
    OfferDetailResponse,
    OfferResponse,
    OfferUpdate,
)
from hr_portal.modules.organization.service import get_owned_project

logger = logging.getLogger(__name__)


class OfferNotFoundError(NotFoundError):
    def __init__(self, offer_id: str):
        super().__init__(f"Offer {offer_id} not found.", error_code="OFFER_NOT_FOUND")


class TdrNotPdfError(ValidationError):
    def __init__(self):
        super().__init__("TDR file must be a PDF.", error_code="TDR_NOT_PDF")


def tdr_url(offer: Offer) -> str | None:
    return f"/offers/{offer.id}/tdr" if offer.tdr_filepath else None


def offer_to_response(offer: Offer, today: date) -> OfferResponse:
    response = OfferResponse.model_validate(offer)
    response.tdr_url = tdr_url(offer)
    response.offer_status = get_offer_status(offer.deadline, today)
    return response


def offer_to_detail(offer: Offer, today: date) -> OfferDetailResponse:
    creator = offer.creator
    return OfferDetailResponse(
        **offer_to_response(offer, today).model_dump(),
        notification_emails=offer.notification_emails or [],
        created_by=offer.created_by,
        created_by_name=creator.name if creator else None,
        created_by_email=creator.email if creator else None,
        archive_window_status=get_archive_window_status(offer.deadline, today),
    )


async def _get_offer(db: AsyncSession, offer_id: str) -> Offer:
    offer = await repository.get_by_id(db, offer_id)
    if offer is None:
        raise OfferNotFoundError(offer_id)
    return offer


async def get_owned_offer(db: AsyncSession, offer_id: str, user: CurrentUser) -> Offer:
    """
    Load an offer and check that ``user`` created it.

    Raises:
        OfferNotFoundError: If it does not exist
        ForbiddenError: If another publisher created it
    """
    offer = await _get_offer(db, offer_id)
    ensure_owner(user, offer.created_by, "Offer")
    return offer


async def _save_tdr(file_store: LocalFileStore, title: str, tdr: UploadedFile) -> tuple[str, str]:
    """Store a TDR upload. Returns (filename, relative path)."""
    filename = f"{sanitize_name(title)}-tdr-{unique_suffix()}.pdf"
    path = await file_store.save(f"tdr/{filename}", tdr.data)
    return filename, path


# ============================================
# Public catalogue
# ============================================


async def list_offers(db: AsyncSession, clock: Clock) -> list[OfferResponse]:
    today = clock.today()
    offers = await repository.list_all(db)
    return [offer_to_response(o, today) for o in offers]


async def get_offer(db: AsyncSession, offer_id: str, clock: Clock) -> OfferDetailResponse:
    offer = await _get_offer(db, offer_id)
    return offer_to_detail(offer, clock.today())


async def get_tdr(db: AsyncSession, offer_id: str, file_store: LocalFileStore) -> tuple[str, Path]:
    """
    Locate the TDR of an offer.

    Returns:
        (download filename, absolute path)

    Raises:
        OfferNotFoundError: If the offer does not exist
        NotFoundError: If the offer has no TDR or the file is gone
    """
    offer = await _get_offer(db, offer_id)
    if not offer.tdr_filepath or not await file_store.exists(offer.tdr_filepath):
        raise NotFoundError("TDR not found for this offer.", error_code="TDR_NOT_FOUND")
    return offer.tdr_filename or "tdr.pdf", file_store.resolve(offer.tdr_filepath)


# ============================================
# Publisher management
# ============================================


async def create_offer(
    db: AsyncSession,
    data: OfferCreate,
    tdr: UploadedFile | None,
    user: CurrentUser,
    file_store: LocalFileStore,
    clock: Clock,
) -> OfferDetailResponse:
    """
    Raises:
        TdrNotPdfError: If the TDR is not a PDF
        ProjectNotFoundError: If the project does not exist
        ForbiddenError: If the project belongs to another publisher
    """
    if tdr is not None and not tdr.is_pdf:
        raise TdrNotPdfError()

    project_id = str(data.project_id)
    await get_owned_project(db, project_id, user)

    tdr_filename = tdr_filepath = None
    if tdr is not None:
        tdr_filename, tdr_filepath = await _save_tdr(file_store, data.title, tdr)

    try:
        offer = await repository.create(
            db,
            type=data.type,
            title=data.title,
            description=data.description,
            country=data.country,
            project_id=project_id,
            reference=data.reference,
            deadline=data.deadline,
            created_by=user.id,
            tdr_filename=tdr_filename,
            tdr_filepath=tdr_filepath,
            notification_emails=clean_notification_emails(data.notification_emails),
        )
    except Exception:
        if tdr_filepath:
            await file_store.delete(tdr_filepath)
        raise

    logger.info(f"Offer {offer.id} created by {user.id}")
    await log_user_action(db, user, f'created offer "{offer.title}"')
    return offer_to_detail(offer, clock.today())


async def update_offer(
    db: AsyncSession,
    offer_id: str,
    data: OfferUpdate,
    tdr: UploadedFile | None,
    user: CurrentUser,
    file_store: LocalFileStore,
    clock: Clock,
) -> OfferDetailResponse:
    """
    Partial update by the offer's creator.

    Notification flags are left as they are, even when the deadline moves.
    """
    offer = await get_owned_offer(db, offer_id, user)

    if tdr is not None and not tdr.is_pdf:
        raise TdrNotPdfError()

    fields = data.model_dump(exclude_unset=True)
    for key in ("type", "title", "country", "reference", "deadline", "project_id"):
        if fields.get(key, ...) is None:
            fields.pop(key)

    if "project_id" in fields:
        fields["project_id"] = str(fields["project_id"])
        await get_owned_project(db, fields["project_id"], user)

    if "notification_emails" in fields:
        fields["notification_emails"] = clean_notification_emails(fields["notification_emails"] or [])

    old_tdr_path = None
    if tdr is not None:
        old_tdr_path = offer.tdr_filepath
        fields["tdr_filename"], fields["tdr_filepath"] = await _save_tdr(
            file_store, fields.get("title", offer.title), tdr
        )

    try:
        offer = await repository.update_fields(db, offer, **fields)
    except Exception:
        if tdr is not None:
            await file_store.delete(fields["tdr_filepath"])
        raise

    if old_tdr_path:
        await file_store.delete(old_tdr_path)

    await log_user_action(db, user, f'updated offer "{offer.title}"')
    return offer_to_detail(offer, clock.today())


async def delete_offer(
    db: AsyncSession,
    offer_id: str,
    user: CurrentUser,
    file_store: LocalFileStore,
) -> None:
    """Delete an offer, its applications and its TDR file."""
    offer = await get_owned_offer(db, offer_id, user)
    title = offer.title
    tdr_path = offer.tdr_filepath

    await repository.delete(db, offer)

    if tdr_path:
        await file_store.delete(tdr_path)

    logger.info(f"Offer {offer_id} deleted by {user.id}")
    await log_user_action(db, user, f'deleted offer "{title}"')
