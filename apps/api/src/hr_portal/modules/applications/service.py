"""
Applications Service

Public submission and staff-side listing of applications.

Submission rules:
- The four base documents are always required
- Tender offers (every type except candidature) also require the six
  tender documents
- Every uploaded document must be a PDF
- One application per (offer, email), compared case-insensitively

Visibility:
- Publishers see applications to their own offers
- Reviewers see every application
"""

import logging
from pathlib import Path

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hr_portal.core.auth import CurrentUser
from hr_portal.core.clock import Clock
from hr_portal.core.email import send_applicant_confirmation
from hr_portal.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from hr_portal.core.permissions import applications_scope, ensure_offer_applications_access
from hr_portal.core.storage import LocalFileStore, sanitize_name, unique_suffix
from hr_portal.core.uploads import UploadedFile
from hr_portal.modules.applications import repository
from hr_portal.modules.applications.documents import (
    ALL_DOCUMENTS,
    BASE_DOCUMENTS,
    DocumentType,
    document_fields,
    parse_document_type,
    required_documents,
)
from hr_portal.modules.applications.models import Application
from hr_portal.modules.applications.schemas import (
    ApplicationResponse,
    ApplicationSubmit,
    OfferApplicationsSummary,
)
from hr_portal.modules.offers import repository as offers_repository
from hr_portal.modules.offers.lifecycle import (
    days_since_expiry,
    get_archive_window_status,
    get_offer_status,
)

logger = logging.getLogger(__name__)


class DuplicateApplicationError(ConflictError):
    def __init__(self):
        super().__init__(
            "You have already applied to this offer.",
            error_code="DUPLICATE_APPLICATION",
        )


def _label(document: DocumentType) -> str:
    return document.value.replace("_", " ").capitalize()


def _missing_document_error(document: DocumentType) -> ValidationError:
    return ValidationError(
        f"{_label(document)} file is required for this offer type.",
        error_code="MISSING_DOCUMENT",
    )


def _not_pdf_error(document: DocumentType) -> ValidationError:
    return ValidationError(
        f"{_label(document)} file must be a PDF.",
        error_code="INVALID_FILE_TYPE",
    )


def document_url(application: Application, document: DocumentType) -> str | None:
    _, path = document_fields(application, document)
    return f"/applications/{application.id}/{document.value}" if path else None


def application_to_response(application: Application) -> ApplicationResponse:
    response = ApplicationResponse.model_validate(application)
    if application.offer is not None:
        response.offer_title = application.offer.title
        response.offer_type = application.offer.type
    for document in ALL_DOCUMENTS:
        setattr(response, f"{document.value}_url", document_url(application, document))
    return response


# ============================================
# Submission
# ============================================


async def submit_application(
    db: AsyncSession,
    data: ApplicationSubmit,
    documents: dict[DocumentType, UploadedFile | None],
    file_store: LocalFileStore,
    clock: Clock,
) -> Application:
    """
    Validate and store a new application with its documents.

    Submissions after the deadline are accepted; the deadline only drives
    notices and the archive window.

    Raises:
        ValidationError: Missing document or non-PDF upload
        NotFoundError: If the offer does not exist
        DuplicateApplicationError: If this email already applied to the offer
    """
    for document in BASE_DOCUMENTS:
        upload = documents.get(document)
        if upload is None:
            raise ValidationError(
                "CV, diploma, ID card and cover letter are required.",
                error_code="MISSING_DOCUMENT",
            )
        if not upload.is_pdf:
            raise _not_pdf_error(document)

    offer = await offers_repository.get_by_id(db, str(data.offer_id))
    if offer is None:
        raise NotFoundError("Offer not found.", error_code="OFFER_NOT_FOUND")

    email = data.email.lower()
    if await repository.find_by_offer_and_email(db, offer.id, email) is not None:
        raise DuplicateApplicationError()

    required = required_documents(offer.type)
    for document in required:
        if documents.get(document) is None:
            raise _missing_document_error(document)

    for document, upload in documents.items():
        if upload is not None and not upload.is_pdf:
            raise _not_pdf_error(document)

    # Documents for slots the offer type does not use are ignored
    folder = f"applicants/{sanitize_name(data.full_name)}"
    fields: dict[str, str] = {}
    saved: list[str] = []
    try:
        for document in required:
            filename = f"{document.value}-{unique_suffix()}.pdf"
            path = await file_store.save(f"{folder}/{filename}", documents[document].data)
            saved.append(path)
            fields[f"{document.value}_filename"] = filename
            fields[f"{document.value}_filepath"] = path

        application = await repository.create(
            db,
            offer_id=offer.id,
            full_name=data.full_name,
            email=email,
            tel_number=data.tel_number,
            applicant_country=data.applicant_country,
            **fields,
        )
    except IntegrityError as e:
        # Lost a race against a concurrent submission with the same email
        await db.rollback()
        await _discard(file_store, saved)
        raise DuplicateApplicationError() from e
    except Exception:
        await _discard(file_store, saved)
        raise

    logger.info(f"Application {application.id} submitted for offer {offer.id}")

    try:
        sent = await send_applicant_confirmation(
            to_email=email,
            applicant_name=data.full_name,
            offer_title=offer.title,
            submitted_on=clock.today(),
        )
        if not sent:
            logger.warning(f"Confirmation email to {email} for application {application.id} was not sent")
    except Exception as e:
        logger.error(f"Failed to send confirmation email for application {application.id}: {e}")

    return application


async def _discard(file_store: LocalFileStore, paths: list[str]) -> None:
    for path in paths:
        await file_store.delete(path)


# ============================================
# Staff views
# ============================================


def _ensure_staff(user: CurrentUser) -> None:
    if not (user.is_publisher or user.is_reviewer):
        raise ForbiddenError("You are not allowed to view applications.")


async def list_applications(db: AsyncSession, user: CurrentUser) -> list[ApplicationResponse]:
    _ensure_staff(user)
    applications = await repository.list_all(db, created_by=applications_scope(user))
    return [application_to_response(a) for a in applications]


async def get_summary(db: AsyncSession, user: CurrentUser, clock: Clock) -> list[OfferApplicationsSummary]:
    """Application counts and lifecycle state per visible offer."""
    _ensure_staff(user)
    today = clock.today()
    rows = await repository.offer_summaries(db, created_by=applications_scope(user))

    return [
        OfferApplicationsSummary(
            offer_id=offer.id,
            offer_title=offer.title,
            offer_type=offer.type,
            offer_department=offer.department_name,
            offer_project=offer.project_name,
            deadline=offer.deadline,
            application_count=count,
            offer_status=get_offer_status(offer.deadline, today),
            archive_window_status=get_archive_window_status(offer.deadline, today),
            days_since_expiry=days_since_expiry(offer.deadline, today),
        )
        for offer, count in rows
    ]


async def get_document(
    db: AsyncSession,
    application_id: str,
    document_type: str,
    user: CurrentUser,
    file_store: LocalFileStore,
) -> tuple[str, Path]:
    """
    Locate one document of an application.

    Returns:
        (filename, absolute path)

    Raises:
        ValidationError: Unknown document type
        NotFoundError: Application, document or file missing
        ForbiddenError: Publisher requesting another publisher's application
    """
    _ensure_staff(user)

    document = parse_document_type(document_type)
    if document is None:
        raise ValidationError(f"Invalid document type: {document_type}", error_code="INVALID_DOCUMENT_TYPE")

    application = await repository.get_by_id(db, application_id)
    if application is None:
        raise NotFoundError("Application not found.", error_code="APPLICATION_NOT_FOUND")

    ensure_offer_applications_access(user, application.offer.created_by if application.offer else None)

    filename, path = document_fields(application, document)
    if not path:
        raise NotFoundError("Document not found.", error_code="DOCUMENT_NOT_FOUND")
    if not await file_store.exists(path):
        logger.warning(f"Document {document.value} of application {application.id} missing on disk: {path}")
        raise NotFoundError("File not found on server.", error_code="FILE_NOT_FOUND")

    return filename or f"{document.value}.pdf", file_store.resolve(path)
