"""
Application document slots.

Every application carries the four base documents. Tenders (every offer
type except ``candidature``) additionally require six tender documents.
"""

import enum

from hr_portal.modules.offers.models import OfferType


class DocumentType(str, enum.Enum):
    CV = "cv"
    DIPLOME = "diplome"
    ID_CARD = "id_card"
    COVER_LETTER = "cover_letter"
    DECLARATION_SUR_HONNEUR = "declaration_sur_honneur"
    FICHE_DE_REFERENCEMENT = "fiche_de_referencement"
    EXTRAIT_REGISTRE = "extrait_registre"
    NOTE_METHODOLOGIQUE = "note_methodologique"
    LISTE_REFERENCES = "liste_references"
    OFFRE_FINANCIERE = "offre_financiere"


BASE_DOCUMENTS = (
    DocumentType.CV,
    DocumentType.DIPLOME,
    DocumentType.ID_CARD,
    DocumentType.COVER_LETTER,
)

TENDER_DOCUMENTS = (
    DocumentType.DECLARATION_SUR_HONNEUR,
    DocumentType.FICHE_DE_REFERENCEMENT,
    DocumentType.EXTRAIT_REGISTRE,
    DocumentType.NOTE_METHODOLOGIQUE,
    DocumentType.LISTE_REFERENCES,
    DocumentType.OFFRE_FINANCIERE,
)

ALL_DOCUMENTS = BASE_DOCUMENTS + TENDER_DOCUMENTS

# File names used inside archives
ARCHIVE_NAMES = {
    DocumentType.CV: "CV",
    DocumentType.DIPLOME: "Diploma",
    DocumentType.ID_CARD: "ID_Card",
    DocumentType.COVER_LETTER: "Cover_Letter",
    DocumentType.DECLARATION_SUR_HONNEUR: "Declaration_Honneur",
    DocumentType.FICHE_DE_REFERENCEMENT: "Fiche_Referencement",
    DocumentType.EXTRAIT_REGISTRE: "Extrait_Registre",
    DocumentType.NOTE_METHODOLOGIQUE: "Note_Methodologique",
    DocumentType.LISTE_REFERENCES: "Liste_References",
    DocumentType.OFFRE_FINANCIERE: "Offre_Financiere",
}


def is_tender(offer_type: OfferType) -> bool:
    return offer_type != OfferType.CANDIDATURE


def required_documents(offer_type: OfferType) -> tuple[DocumentType, ...]:
    """
    >>> len(required_documents(OfferType.CANDIDATURE))
    4
    >>> len(required_documents(OfferType.CONSULTATION))
    10
    """
    return ALL_DOCUMENTS if is_tender(offer_type) else BASE_DOCUMENTS


def parse_document_type(value: str) -> DocumentType | None:
    try:
        return DocumentType(value)
    except ValueError:
        return None


def document_fields(application, document: DocumentType) -> tuple[str | None, str | None]:
    """(filename, stored path) of one slot of an application."""
    return (
        getattr(application, f"{document.value}_filename", None),
        getattr(application, f"{document.value}_filepath", None),
    )
