"""
Unit tests for application submission and staff views.

Files are written to a temporary LocalFileStore; repositories and the
confirmation email are patched.
"""

from datetime import UTC, date, datetime
from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from hr_portal.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from hr_portal.core.storage import LocalFileStore
from hr_portal.core.uploads import UploadedFile
from hr_portal.modules.applications.documents import ALL_DOCUMENTS, BASE_DOCUMENTS, DocumentType
from hr_portal.modules.applications.models import Application
from hr_portal.modules.applications.schemas import ApplicationSubmit
from hr_portal.modules.applications.service import get_document, get_summary, list_applications, submit_application
from hr_portal.modules.offers.lifecycle import ArchiveWindowStatus, OfferStatus
from hr_portal.modules.offers.models import OfferType

SERVICE = "hr_portal.modules.applications.service"


def pdf(name: str) -> UploadedFile:
    return UploadedFile(filename=f"{name}.pdf", content_type="application/pdf", data=b"%PDF-1.4 " + name.encode())


def make_offer(offer_type: OfferType = OfferType.CANDIDATURE, created_by: str = "owner") -> MagicMock:
    offer = MagicMock()
    offer.id = str(uuid4())
    offer.title = "Backend Developer"
    offer.type = offer_type
    offer.created_by = created_by
    offer.deadline = date(2025, 1, 10)
    return offer


def base_documents() -> dict:
    return {document: pdf(document.value) for document in BASE_DOCUMENTS}


@pytest.fixture
def file_store(tmp_path):
    return LocalFileStore(tmp_path)


@pytest.fixture
def submission():
    return ApplicationSubmit(
        offer_id=str(uuid4()),
        full_name="Jane Doe",
        email="Jane@X.com",
        tel_number="+221 77 000 00 00",
        applicant_country="Senegal",
    )


def stored_files(root) -> list:
    return [p for p in root.rglob("*") if p.is_file()]


class TestSubmitApplication:
    """Tests for submit_application."""

    @pytest.mark.asyncio
    async def test_candidature_with_base_documents(self, mock_db, submission, file_store, clock, tmp_path):
        offer = make_offer()
        created = MagicMock(id=str(uuid4()))

        with (
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.offers_repository") as mock_offers,
            patch(f"{SERVICE}.send_applicant_confirmation", new_callable=AsyncMock) as mock_email,
        ):
            mock_offers.get_by_id = AsyncMock(return_value=offer)
            mock_repo.find_by_offer_and_email = AsyncMock(return_value=None)
            mock_repo.create = AsyncMock(return_value=created)
            mock_email.return_value = True

            result = await submit_application(mock_db, submission, base_documents(), file_store, clock)

            assert result is created
            fields = mock_repo.create.call_args.kwargs
            assert fields["email"] == "jane@x.com"
            assert fields["cv_filepath"].startswith("applicants/jane_doe/cv-")
            assert "offre_financiere_filepath" not in fields
            assert len(stored_files(tmp_path)) == 4
            mock_email.assert_awaited_once()
            assert mock_email.call_args.kwargs["to_email"] == "jane@x.com"

    @pytest.mark.asyncio
    async def test_missing_base_document(self, mock_db, submission, file_store, clock):
        documents = base_documents()
        documents[DocumentType.ID_CARD] = None

        with pytest.raises(ValidationError) as exc_info:
            await submit_application(mock_db, submission, documents, file_store, clock)

        assert exc_info.value.error_code == "MISSING_DOCUMENT"

    @pytest.mark.asyncio
    async def test_tender_requires_tender_documents(self, mock_db, submission, file_store, clock):
        """A consultation without the financial offer names the missing file."""
        documents = {document: pdf(document.value) for document in ALL_DOCUMENTS}
        documents[DocumentType.OFFRE_FINANCIERE] = None

        with (
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.offers_repository") as mock_offers,
        ):
            mock_offers.get_by_id = AsyncMock(return_value=make_offer(OfferType.CONSULTATION))
            mock_repo.find_by_offer_and_email = AsyncMock(return_value=None)
            mock_repo.create = AsyncMock()

            with pytest.raises(ValidationError) as exc_info:
                await submit_application(mock_db, submission, documents, file_store, clock)

            assert exc_info.value.error_code == "MISSING_DOCUMENT"
            assert "Offre financiere" in exc_info.value.message
            mock_repo.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_non_pdf_rejected(self, mock_db, submission, file_store, clock):
        documents = base_documents()
        documents[DocumentType.CV] = UploadedFile(filename="cv.docx", content_type="application/msword", data=b"x")

        with pytest.raises(ValidationError) as exc_info:
            await submit_application(mock_db, submission, documents, file_store, clock)

        assert exc_info.value.error_code == "INVALID_FILE_TYPE"

    @pytest.mark.asyncio
    async def test_unknown_offer(self, mock_db, submission, file_store, clock):
        with patch(f"{SERVICE}.offers_repository") as mock_offers:
            mock_offers.get_by_id = AsyncMock(return_value=None)

            with pytest.raises(NotFoundError) as exc_info:
                await submit_application(mock_db, submission, base_documents(), file_store, clock)

            assert exc_info.value.error_code == "OFFER_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_duplicate_email(self, mock_db, submission, file_store, clock, tmp_path):
        with (
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.offers_repository") as mock_offers,
        ):
            mock_offers.get_by_id = AsyncMock(return_value=make_offer())
            mock_repo.find_by_offer_and_email = AsyncMock(return_value=MagicMock())

            with pytest.raises(ConflictError) as exc_info:
                await submit_application(mock_db, submission, base_documents(), file_store, clock)

            assert exc_info.value.message == "You have already applied to this offer."
            assert stored_files(tmp_path) == []

    @pytest.mark.asyncio
    async def test_lost_race_discards_files(self, mock_db, submission, file_store, clock, tmp_path):
        """The unique constraint catching a concurrent duplicate leaves no files behind."""
        with (
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.offers_repository") as mock_offers,
        ):
            mock_offers.get_by_id = AsyncMock(return_value=make_offer())
            mock_repo.find_by_offer_and_email = AsyncMock(return_value=None)
            mock_repo.create = AsyncMock(side_effect=IntegrityError("insert", {}, Exception("dup")))

            with pytest.raises(ConflictError):
                await submit_application(mock_db, submission, base_documents(), file_store, clock)

            mock_db.rollback.assert_awaited_once()
            assert stored_files(tmp_path) == []

    @pytest.mark.asyncio
    async def test_email_failure_is_not_fatal(self, mock_db, submission, file_store, clock):
        created = MagicMock(id=str(uuid4()))

        with (
            patch(f"{SERVICE}.repository") as mock_repo,
            patch(f"{SERVICE}.offers_repository") as mock_offers,
            patch(f"{SERVICE}.send_applicant_confirmation", new_callable=AsyncMock) as mock_email,
        ):
            mock_offers.get_by_id = AsyncMock(return_value=make_offer())
            mock_repo.find_by_offer_and_email = AsyncMock(return_value=None)
            mock_repo.create = AsyncMock(return_value=created)
            mock_email.side_effect = RuntimeError("smtp down")

            assert await submit_application(mock_db, submission, base_documents(), file_store, clock) is created


class TestGetDocument:
    """Tests for get_document."""

    @staticmethod
    def make_application(owner: str, path: str | None):
        application = MagicMock()
        application.id = str(uuid4())
        application.offer.created_by = owner
        application.created_at = datetime(2025, 1, 5, tzinfo=UTC)
        application.cv_filename = "cv-1.pdf" if path else None
        application.cv_filepath = path
        return application

    @pytest.mark.asyncio
    async def test_invalid_type(self, mock_db, reviewer, file_store):
        with pytest.raises(ValidationError) as exc_info:
            await get_document(mock_db, "app", "passport", reviewer, file_store)
        assert exc_info.value.error_code == "INVALID_DOCUMENT_TYPE"

    @pytest.mark.asyncio
    async def test_reviewer_reads_any_document(self, mock_db, reviewer, file_store, tmp_path):
        (tmp_path / "applicants").mkdir()
        (tmp_path / "applicants" / "cv-1.pdf").write_bytes(b"%PDF")
        application = self.make_application("someone", "applicants/cv-1.pdf")

        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=application)

            filename, path = await get_document(mock_db, application.id, "cv", reviewer, file_store)

            assert filename == "cv-1.pdf"
            assert path == (tmp_path / "applicants" / "cv-1.pdf").resolve()

    @pytest.mark.asyncio
    async def test_publisher_blocked_on_other_offer(self, mock_db, publisher, file_store):
        application = self.make_application("someone-else", "applicants/cv-1.pdf")

        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=application)

            with pytest.raises(ForbiddenError):
                await get_document(mock_db, application.id, "cv", publisher, file_store)

    @pytest.mark.asyncio
    async def test_empty_slot(self, mock_db, publisher, file_store):
        application = self.make_application(publisher.id, None)

        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=application)

            with pytest.raises(NotFoundError) as exc_info:
                await get_document(mock_db, application.id, "cv", publisher, file_store)

            assert exc_info.value.error_code == "DOCUMENT_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_file_missing_on_disk(self, mock_db, publisher, file_store):
        application = self.make_application(publisher.id, "applicants/gone.pdf")

        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=application)

            with pytest.raises(NotFoundError) as exc_info:
                await get_document(mock_db, application.id, "cv", publisher, file_store)

            assert exc_info.value.error_code == "FILE_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_admin_is_not_staff(self, mock_db, admin_user, file_store):
        with pytest.raises(ForbiddenError):
            await get_document(mock_db, "app", "cv", admin_user, file_store)


class FixedClock:
    def __init__(self, today: date):
        self.current = today

    def today(self) -> date:
        return self.current


def make_summary_offer(created_by: str, title: str = "Backend Developer") -> MagicMock:
    offer = make_offer(created_by=created_by)
    offer.title = title
    offer.department_name = "IT"
    offer.project_name = "Digital Services"
    return offer


class TestGetSummary:
    """Tests for get_summary."""

    @pytest.mark.asyncio
    async def test_publisher_sees_own_offers(self, mock_db, publisher, clock):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.offer_summaries = AsyncMock(return_value=[])

            await get_summary(mock_db, publisher, clock)

            mock_repo.offer_summaries.assert_awaited_once_with(mock_db, created_by=publisher.id)

    @pytest.mark.asyncio
    async def test_reviewer_sees_all_offers(self, mock_db, reviewer, clock):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.offer_summaries = AsyncMock(return_value=[])

            await get_summary(mock_db, reviewer, clock)

            mock_repo.offer_summaries.assert_awaited_once_with(mock_db, created_by=None)

    @pytest.mark.asyncio
    async def test_active_offer(self, mock_db, publisher, clock):
        """On 2025-01-08 an offer due 2025-01-10 is still active."""
        offer = make_summary_offer(publisher.id)

        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.offer_summaries = AsyncMock(return_value=[(offer, 3)])

            [summary] = await get_summary(mock_db, publisher, clock)

            assert summary.offer_id == offer.id
            assert summary.offer_department == "IT"
            assert summary.offer_project == "Digital Services"
            assert summary.application_count == 3
            assert summary.offer_status == OfferStatus.ACTIVE
            assert summary.archive_window_status == ArchiveWindowStatus.ACTIVE
            assert summary.days_since_expiry == -2

    @pytest.mark.asyncio
    async def test_last_day_of_archive_window(self, mock_db, reviewer):
        offer = make_summary_offer("someone")

        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.offer_summaries = AsyncMock(return_value=[(offer, 0)])

            [summary] = await get_summary(mock_db, reviewer, FixedClock(date(2025, 1, 24)))

            assert summary.application_count == 0
            assert summary.offer_status == OfferStatus.EXPIRED
            assert summary.days_since_expiry == 14
            assert summary.archive_window_status == ArchiveWindowStatus.OPEN

    @pytest.mark.asyncio
    async def test_archive_window_closed(self, mock_db, reviewer):
        offer = make_summary_offer("someone")

        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.offer_summaries = AsyncMock(return_value=[(offer, 5)])

            [summary] = await get_summary(mock_db, reviewer, FixedClock(date(2025, 1, 25)))

            assert summary.days_since_expiry == 15
            assert summary.archive_window_status == ArchiveWindowStatus.CLOSED

    @pytest.mark.asyncio
    async def test_admin_is_not_staff(self, mock_db, admin_user, clock):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.offer_summaries = AsyncMock()

            with pytest.raises(ForbiddenError):
                await get_summary(mock_db, admin_user, clock)

            mock_repo.offer_summaries.assert_not_called()


class TestListApplications:
    """Tests for list_applications."""

    @staticmethod
    def make_application(offer: MagicMock) -> MagicMock:
        application = MagicMock(spec=Application)
        application.id = str(uuid4())
        application.offer_id = offer.id
        application.offer = offer
        application.full_name = "Jane Doe"
        application.email = "jane@x.com"
        application.tel_number = "+221 77 000 00 00"
        application.applicant_country = "Senegal"
        application.created_at = datetime(2025, 1, 5, tzinfo=UTC)
        application.archived_at = None
        for document in ALL_DOCUMENTS:
            setattr(application, f"{document.value}_filename", None)
            setattr(application, f"{document.value}_filepath", None)
        application.cv_filename = "cv-1.pdf"
        application.cv_filepath = "applicants/jane_doe/cv-1.pdf"
        return application

    @pytest.mark.asyncio
    async def test_publisher_scope_and_urls(self, mock_db, publisher):
        application = self.make_application(make_offer(created_by=publisher.id))

        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.list_all = AsyncMock(return_value=[application])

            [response] = await list_applications(mock_db, publisher)

            mock_repo.list_all.assert_awaited_once_with(mock_db, created_by=publisher.id)
            assert response.offer_title == "Backend Developer"
            assert response.offer_type == OfferType.CANDIDATURE
            assert response.cv_url == f"/applications/{application.id}/cv"
            assert response.diplome_url is None

    @pytest.mark.asyncio
    async def test_reviewer_scope(self, mock_db, reviewer):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.list_all = AsyncMock(return_value=[])

            assert await list_applications(mock_db, reviewer) == []
            mock_repo.list_all.assert_awaited_once_with(mock_db, created_by=None)
