"""
Application Archival Engine

Bundles the applications of an expired offer into one zip for download.

Rules:
- Publishers may archive their own offers, reviewers any offer
- The offer must have expired (deadline before today) and be inside the
  archive window (at most ARCHIVE_WINDOW_DAYS days since the deadline)
- Only applications without ``archived_at`` are bundled; building an
  archive never sets it, so every build re-bundles the same applications

Zip layout:
    <offer title>/<applicant name>/CV.pdf
    <offer title>/<applicant name>/candidate_info.txt
    ...

Missing or unreadable documents are skipped with a warning; the rest of
the bundle is still produced.
"""

import asyncio
import io
import logging
import re
import zipfile
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Protocol

from hr_portal.core.auth import CurrentUser
from hr_portal.core.clock import Clock
from hr_portal.core.errors import (
    ArchiveWindowClosedError,
    ForbiddenError,
    NotFoundError,
    OfferNotExpiredError,
    TransientIOError,
    ValidationError,
)
from hr_portal.core.permissions import ensure_offer_applications_access
from hr_portal.core.storage import LocalFileStore
from hr_portal.modules.applications.documents import ALL_DOCUMENTS, ARCHIVE_NAMES, document_fields
from hr_portal.modules.offers.lifecycle import ARCHIVE_WINDOW_DAYS, AuditTrail, days_since_expiry

logger = logging.getLogger(__name__)

_ARCHIVE_NAME = re.compile(
    r"archived_applications_[A-Za-z0-9_]+_"
    r"(?P<offer_id>[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12})_"
    r"\d{4}-\d{2}-\d{2}\.zip"
)
_FOLDER_UNSAFE = re.compile(r"[^a-zA-Z0-9]")


def folder_name(value: str) -> str:
    """Zip folder name: non-alphanumerics become ``_``, case is kept."""
    return _FOLDER_UNSAFE.sub("_", value or "") or "_"


def archive_filename(offer_title: str, offer_id: str, today: date) -> str:
    """``archived_applications_<title>_<offer id>_<YYYY-MM-DD>.zip``"""
    return f"archived_applications_{folder_name(offer_title)}_{offer_id}_{today.isoformat()}.zip"


def archive_offer_id(filename: str) -> str | None:
    """Offer ID encoded in an archive name, or None if the name is not one we build."""
    match = _ARCHIVE_NAME.fullmatch(filename)
    return match.group("offer_id") if match else None


@dataclass
class ArchiveOffer:
    id: str
    title: str
    type: str
    deadline: date
    created_by: str
    department_name: str | None = None


@dataclass
class ArchiveApplicant:
    id: str
    full_name: str
    email: str
    tel_number: str
    applicant_country: str
    created_at: datetime
    # ARCHIVE_NAMES value -> (original filename, stored path)
    documents: dict[str, tuple[str, str]]


@dataclass
class ArchiveResult:
    archive_file: str
    applications_count: int
    documents_added: int
    documents_skipped: int


class ArchiveStore(Protocol):
    async def get_offer(self, offer_id: str) -> ArchiveOffer | None: ...

    async def get_unarchived_applications(self, offer_id: str) -> list[ArchiveApplicant]: ...


def applicant_documents(application) -> dict[str, tuple[str, str]]:
    """Filled document slots of an application, keyed by archive name."""
    documents = {}
    for document in ALL_DOCUMENTS:
        filename, path = document_fields(application, document)
        if path:
            documents[ARCHIVE_NAMES[document]] = (filename or "", path)
    return documents


def candidate_info(applicant: ArchiveApplicant, offer: ArchiveOffer) -> str:
    lines = [
        f"Name: {applicant.full_name}",
        f"Email: {applicant.email}",
        f"Phone: {applicant.tel_number}",
        f"Country: {applicant.applicant_country}",
        f"Applied for: {offer.title}",
        f"Offer Type: {offer.type}",
        f"Department: {offer.department_name or 'N/A'}",
        f"Application Date: {applicant.created_at.date().isoformat()}",
    ]
    return "\n".join(lines) + "\n"


class ApplicationArchiver:
    """Builds and serves application archives."""

    def __init__(
        self,
        store: ArchiveStore,
        file_store: LocalFileStore,
        archive_store: LocalFileStore,
        clock: Clock,
        audit: AuditTrail,
    ):
        self.store = store
        self.file_store = file_store
        self.archive_store = archive_store
        self.clock = clock
        self.audit = audit

    async def build_archive(self, offer_id: str, user: CurrentUser) -> ArchiveResult:
        """
        Raises:
            ForbiddenError: Not a publisher or reviewer, or not the offer's creator
            NotFoundError: Offer missing, or no applications to bundle
            OfferNotExpiredError: Deadline is today or later
            ArchiveWindowClosedError: Deadline more than ARCHIVE_WINDOW_DAYS ago
        """
        if not (user.is_publisher or user.is_reviewer):
            raise ForbiddenError("You are not allowed to archive applications.")

        offer = await self.store.get_offer(offer_id)
        if offer is None:
            raise NotFoundError("Offer not found.", error_code="OFFER_NOT_FOUND")

        ensure_offer_applications_access(user, offer.created_by)

        today = self.clock.today()
        if offer.deadline >= today:
            raise OfferNotExpiredError()
        if days_since_expiry(offer.deadline, today) > ARCHIVE_WINDOW_DAYS:
            raise ArchiveWindowClosedError()

        applicants = await self.store.get_unarchived_applications(offer.id)
        if not applicants:
            raise NotFoundError("No applications found for this offer.", error_code="NO_APPLICATIONS")

        filename = archive_filename(offer.title, offer.id, today)
        data, added, skipped = await asyncio.to_thread(self._build_zip, offer, applicants)
        await self.archive_store.save(filename, data)

        logger.info(
            f"Archive {filename} built for offer {offer.id}: "
            f"{len(applicants)} application(s), {added} document(s), {skipped} skipped"
        )
        await self.audit.record(f'{user.label} downloaded {len(applicants)} applications for offer "{offer.title}"')

        return ArchiveResult(
            archive_file=filename,
            applications_count=len(applicants),
            documents_added=added,
            documents_skipped=skipped,
        )

    def _read_document(self, path: str) -> bytes:
        try:
            return self.file_store.read_bytes(path)
        except (NotFoundError, ValidationError):
            raise
        except OSError as e:
            raise TransientIOError(f"Could not read {path}: {e}") from e

    def _build_zip(self, offer: ArchiveOffer, applicants: list[ArchiveApplicant]) -> tuple[bytes, int, int]:
        buffer = io.BytesIO()
        added = skipped = 0
        offer_folder = folder_name(offer.title)
        used_folders: set[str] = set()

        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
            for applicant in applicants:
                base = folder_name(applicant.full_name)
                folder = base
                counter = 2
                while folder in used_folders:
                    folder = f"{base}_{counter}"
                    counter += 1
                used_folders.add(folder)
                prefix = f"{offer_folder}/{folder}"

                for archive_name, (original, path) in applicant.documents.items():
                    extension = original.rsplit(".", 1)[-1].lower() if "." in original else "pdf"
                    try:
                        content = self._read_document(path)
                    except (NotFoundError, ValidationError, TransientIOError) as e:
                        logger.warning(
                            f"Skipping {archive_name} of application {applicant.id}: {e.message}"
                        )
                        skipped += 1
                        continue
                    archive.writestr(f"{prefix}/{archive_name}.{extension}", content)
                    added += 1

                archive.writestr(f"{prefix}/candidate_info.txt", candidate_info(applicant, offer))

        return buffer.getvalue(), added, skipped

    async def download_archive(self, filename: str, user: CurrentUser) -> Path:
        """
        Absolute path of a previously built archive.

        The offer ID in the name decides access: publishers may only
        download archives of their own offers.

        Raises:
            ForbiddenError: Not a publisher or reviewer, or not the offer's creator
            NotFoundError: Unknown name, unknown offer, or a name with path components
        """
        if not (user.is_publisher or user.is_reviewer):
            raise ForbiddenError("You are not allowed to download archives.")

        offer_id = archive_offer_id(filename)
        if offer_id is None:
            logger.warning(f"Rejected archive download name {filename!r} from {user}")
            raise NotFoundError("Archive not found.", error_code="ARCHIVE_NOT_FOUND")

        offer = await self.store.get_offer(offer_id)
        if offer is None:
            raise NotFoundError("Archive not found.", error_code="ARCHIVE_NOT_FOUND")
        ensure_offer_applications_access(user, offer.created_by)

        if not await self.archive_store.exists(filename):
            raise NotFoundError("Archive not found.", error_code="ARCHIVE_NOT_FOUND")

        return self.archive_store.resolve(filename)
