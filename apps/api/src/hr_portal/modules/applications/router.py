"""
Applications Router

Endpoints:
- POST /apply - public, multipart, rate limited
- GET /applications - publisher (own offers) / reviewer (all)
- GET /applications/summary - counts and archive window per offer
- POST /applications/archive/{offer_id} - build a zip of an expired offer's applications
- GET /applications/archive/{filename} - download a built zip
- GET /applications/{application_id}/{document_type} - one document, inline

The archive routes are declared before the document route so that
``archive/<name>`` is never read as an application ID.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.ext.asyncio import AsyncSession

from hr_portal.core.auth import CurrentUser, require_staff
from hr_portal.core.clock import Clock, get_clock
from hr_portal.core.config import settings
from hr_portal.core.database import get_db
from hr_portal.core.rate_limit import rate_limiter
from hr_portal.core.storage import LocalFileStore, get_archive_store, get_file_store
from hr_portal.core.uploads import read_upload, validate_form
from hr_portal.modules.applications import service
from hr_portal.modules.applications.archive import ApplicationArchiver
from hr_portal.modules.applications.documents import DocumentType
from hr_portal.modules.applications.schemas import (
    ApplicationResponse,
    ApplicationSubmit,
    ApplicationSubmitResponse,
    ArchiveResponse,
    OfferApplicationsSummary,
)
from hr_portal.modules.applications.store import SqlArchiveStore
from hr_portal.modules.audit.service import SqlAuditTrail

logger = logging.getLogger(__name__)

router = APIRouter()

_AUTH_RESPONSES = {
    401: {"description": "Unauthorized - invalid or missing token"},
    403: {"description": "Forbidden - not staff, or not the offer's creator"},
}


def get_archiver(
    db: AsyncSession = Depends(get_db),
    file_store: LocalFileStore = Depends(get_file_store),
    archive_store: LocalFileStore = Depends(get_archive_store),
    clock: Clock = Depends(get_clock),
) -> ApplicationArchiver:
    return ApplicationArchiver(
        store=SqlArchiveStore(db),
        file_store=file_store,
        archive_store=archive_store,
        clock=clock,
        audit=SqlAuditTrail(db),
    )


@router.post(
    "/apply",
    response_model=ApplicationSubmitResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit Application",
    description=(
        "Public submission. CV, diploma, ID card and cover letter are always required; "
        "tender offers also require the six tender documents. All files must be PDFs."
    ),
    dependencies=[
        Depends(
            rate_limiter(
                "apply",
                settings.apply_rate_limit,
                settings.apply_rate_window_seconds,
            )
        )
    ],
    responses={
        400: {"description": "Missing or non-PDF document, or duplicate application"},
        404: {"description": "Offer not found"},
        429: {"description": "Too many submissions"},
    },
)
async def apply(
    offer_id: str = Form(...),
    full_name: str = Form(...),
    email: str = Form(...),
    tel_number: str = Form(...),
    applicant_country: str = Form(...),
    cv: UploadFile | None = File(None),
    diplome: UploadFile | None = File(None),
    id_card: UploadFile | None = File(None),
    cover_letter: UploadFile | None = File(None),
    declaration_sur_honneur: UploadFile | None = File(None),
    fiche_de_referencement: UploadFile | None = File(None),
    extrait_registre: UploadFile | None = File(None),
    note_methodologique: UploadFile | None = File(None),
    liste_references: UploadFile | None = File(None),
    offre_financiere: UploadFile | None = File(None),
    db: AsyncSession = Depends(get_db),
    file_store: LocalFileStore = Depends(get_file_store),
    clock: Clock = Depends(get_clock),
) -> ApplicationSubmitResponse:
    data = validate_form(
        ApplicationSubmit,
        offer_id=offer_id,
        full_name=full_name,
        email=email,
        tel_number=tel_number,
        applicant_country=applicant_country,
    )
    uploads = {
        DocumentType.CV: cv,
        DocumentType.DIPLOME: diplome,
        DocumentType.ID_CARD: id_card,
        DocumentType.COVER_LETTER: cover_letter,
        DocumentType.DECLARATION_SUR_HONNEUR: declaration_sur_honneur,
        DocumentType.FICHE_DE_REFERENCEMENT: fiche_de_referencement,
        DocumentType.EXTRAIT_REGISTRE: extrait_registre,
        DocumentType.NOTE_METHODOLOGIQUE: note_methodologique,
        DocumentType.LISTE_REFERENCES: liste_references,
        DocumentType.OFFRE_FINANCIERE: offre_financiere,
    }
    documents = {document: await read_upload(upload) for document, upload in uploads.items()}

    application = await service.submit_application(db, data, documents, file_store, clock)
    return ApplicationSubmitResponse(
        message="Application submitted successfully",
        application_id=application.id,
    )


@router.get(
    "/applications",
    response_model=list[ApplicationResponse],
    summary="List Applications",
    responses=_AUTH_RESPONSES,
)
async def list_applications(
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(require_staff),
) -> list[ApplicationResponse]:
    return await service.list_applications(db, user)


@router.get(
    "/applications/summary",
    response_model=list[OfferApplicationsSummary],
    summary="Applications Summary",
    description="Per offer: application count, offer status and archive window.",
    responses=_AUTH_RESPONSES,
)
async def applications_summary(
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(require_staff),
    clock: Clock = Depends(get_clock),
) -> list[OfferApplicationsSummary]:
    return await service.get_summary(db, user, clock)


@router.post(
    "/applications/archive/{offer_id}",
    response_model=ArchiveResponse,
    summary="Archive Applications",
    description=(
        "Bundle the applications of an expired offer into a zip. "
        "Available from the day after the deadline for 14 days."
    ),
    responses={
        400: {"description": "Offer not expired yet, or archive window closed"},
        404: {"description": "Offer not found, or no applications"},
        **_AUTH_RESPONSES,
    },
)
async def archive_applications(
    offer_id: UUID,
    user: CurrentUser = Depends(require_staff),
    archiver: ApplicationArchiver = Depends(get_archiver),
) -> ArchiveResponse:
    result = await archiver.build_archive(str(offer_id), user)
    return ArchiveResponse(
        message="Applications archived successfully",
        archive_file=result.archive_file,
        applications_count=result.applications_count,
    )


@router.get(
    "/applications/archive/{filename}",
    summary="Download Archive",
    response_class=FileResponse,
    responses={404: {"description": "Archive not found"}, **_AUTH_RESPONSES},
)
async def download_archive(
    filename: str,
    user: CurrentUser = Depends(require_staff),
    archiver: ApplicationArchiver = Depends(get_archiver),
) -> FileResponse:
    path = await archiver.download_archive(filename, user)
    return FileResponse(path, media_type="application/zip", filename=filename)


@router.get(
    "/applications/{application_id}/{document_type}",
    summary="Download Application Document",
    response_class=FileResponse,
    responses={
        400: {"description": "Invalid document type"},
        404: {"description": "Application, document or file not found"},
        **_AUTH_RESPONSES,
    },
)
async def download_document(
    application_id: UUID,
    document_type: str,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(require_staff),
    file_store: LocalFileStore = Depends(get_file_store),
) -> FileResponse:
    filename, path = await service.get_document(db, str(application_id), document_type, user, file_store)
    return FileResponse(
        path,
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="{filename}"'},
    )
