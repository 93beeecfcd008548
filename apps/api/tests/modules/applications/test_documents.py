"""
Tests for application document slots.
"""

from unittest.mock import MagicMock

import pytest

from hr_portal.modules.applications.documents import (
    ARCHIVE_NAMES,
    BASE_DOCUMENTS,
    DocumentType,
    document_fields,
    is_tender,
    parse_document_type,
    required_documents,
)
from hr_portal.modules.offers.models import OfferType


class TestRequiredDocuments:
    """Tests for the per-type document requirements."""

    def test_candidature_needs_base_documents_only(self):
        assert required_documents(OfferType.CANDIDATURE) == BASE_DOCUMENTS

    @pytest.mark.parametrize(
        "offer_type",
        [
            OfferType.MANIFESTATION,
            OfferType.APPEL_D_OFFRE_SERVICE,
            OfferType.APPEL_D_OFFRE_EQUIPEMENT,
            OfferType.CONSULTATION,
        ],
    )
    def test_tenders_need_all_ten(self, offer_type):
        assert is_tender(offer_type)
        required = required_documents(offer_type)
        assert len(required) == 10
        assert DocumentType.OFFRE_FINANCIERE in required

    def test_every_slot_has_an_archive_name(self):
        assert set(ARCHIVE_NAMES) == set(DocumentType)


class TestParseDocumentType:
    """Tests for parse_document_type."""

    def test_known_value(self):
        assert parse_document_type("cover_letter") is DocumentType.COVER_LETTER

    def test_unknown_value(self):
        assert parse_document_type("passport") is None


def test_document_fields_reads_slot_columns():
    application = MagicMock()
    application.cv_filename = "cv-1.pdf"
    application.cv_filepath = "applicants/jane/cv-1.pdf"

    assert document_fields(application, DocumentType.CV) == ("cv-1.pdf", "applicants/jane/cv-1.pdf")
