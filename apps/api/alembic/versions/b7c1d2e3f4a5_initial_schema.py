"""initial schema

Revision ID: b7c1d2e3f4a5
Revises:
Create Date: 2025-01-06 09:00:00.000000

This migration creates:
1. users (with the user_role enum)
2. departments and projects, unique per creator
3. offers (with the offer_type enum and the expiration notice flags)
4. applications, unique per (offer, email), deleted with their offer
5. logs, the append-only audit trail
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "b7c1d2e3f4a5"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

DOCUMENT_SLOTS = (
    "cv",
    "diplome",
    "id_card",
    "cover_letter",
    "declaration_sur_honneur",
    "fiche_de_referencement",
    "extrait_registre",
    "note_methodologique",
    "liste_references",
    "offre_financiere",
)


def _base_columns() -> list[sa.Column]:
    """Primary key and timestamps (from BaseModel)."""
    return [
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
    ]


def _document_columns() -> list[sa.Column]:
    columns = []
    for slot in DOCUMENT_SLOTS:
        columns.append(sa.Column(f"{slot}_filename", sa.String(length=255), nullable=True))
        columns.append(sa.Column(f"{slot}_filepath", sa.String(length=500), nullable=True))
    return columns


def upgrade() -> None:
    """Create all tables."""
    user_role_enum = postgresql.ENUM(
        "admin",
        "comite_ajout",
        "comite_ouverture",
        name="user_role",
        create_type=False,  # Created explicitly with checkfirst
    )
    user_role_enum.create(op.get_bind(), checkfirst=True)

    offer_type_enum = postgresql.ENUM(
        "candidature",
        "manifestation",
        "appel_d_offre_service",
        "appel_d_offre_equipement",
        "consultation",
        name="offer_type",
        create_type=False,
    )
    offer_type_enum.create(op.get_bind(), checkfirst=True)

    # Users
    op.create_table(
        "users",
        *_base_columns(),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("password_hash", sa.Text(), nullable=False),
        sa.Column("role", user_role_enum, nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # Departments
    op.create_table(
        "departments",
        *_base_columns(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("created_by", postgresql.UUID(as_uuid=False), nullable=False),
        sa.ForeignKeyConstraint(["created_by"], ["users.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("name", "created_by", name="uq_departments_name_created_by"),
    )
    op.create_index("ix_departments_created_by", "departments", ["created_by"])

    # Projects
    op.create_table(
        "projects",
        *_base_columns(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("department_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("created_by", postgresql.UUID(as_uuid=False), nullable=False),
        sa.ForeignKeyConstraint(["department_id"], ["departments.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["created_by"], ["users.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "name",
            "department_id",
            "created_by",
            name="uq_projects_name_department_created_by",
        ),
    )
    op.create_index("ix_projects_department_id", "projects", ["department_id"])
    op.create_index("ix_projects_created_by", "projects", ["created_by"])

    # Offers
    op.create_table(
        "offers",
        *_base_columns(),
        sa.Column("type", offer_type_enum, nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("country", sa.String(length=100), nullable=False),
        sa.Column("reference", sa.String(length=100), nullable=False),
        sa.Column("deadline", sa.Date(), nullable=False),
        sa.Column("project_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("created_by", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("tdr_filename", sa.String(length=255), nullable=True),
        sa.Column("tdr_filepath", sa.String(length=500), nullable=True),
        sa.Column("notification_emails", postgresql.JSON(astext_type=sa.Text()), nullable=False),
        # Expiration notice flags (each goes false -> true once)
        sa.Column("two_day_notified", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("one_day_notified", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("deadline_notified", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.ForeignKeyConstraint(["project_id"], ["projects.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["created_by"], ["users.id"], ondelete="RESTRICT"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_offers_deadline", "offers", ["deadline"])
    op.create_index("ix_offers_project_id", "offers", ["project_id"])
    op.create_index("ix_offers_created_by", "offers", ["created_by"])

    # Applications
    op.create_table(
        "applications",
        *_base_columns(),
        sa.Column("offer_id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("full_name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("tel_number", sa.String(length=50), nullable=False),
        sa.Column("applicant_country", sa.String(length=100), nullable=False),
        *_document_columns(),
        sa.Column("archived_at", sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(["offer_id"], ["offers.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("offer_id", "email", name="uq_applications_offer_email"),
    )
    op.create_index("ix_applications_offer_id", "applications", ["offer_id"])

    # Audit trail
    op.create_table(
        "logs",
        sa.Column("id", postgresql.UUID(as_uuid=False), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_logs_created_at", "logs", ["created_at"])


def downgrade() -> None:
    """Drop all tables and enum types."""
    op.drop_index("ix_logs_created_at", table_name="logs")
    op.drop_table("logs")

    op.drop_index("ix_applications_offer_id", table_name="applications")
    op.drop_table("applications")

    op.drop_index("ix_offers_created_by", table_name="offers")
    op.drop_index("ix_offers_project_id", table_name="offers")
    op.drop_index("ix_offers_deadline", table_name="offers")
    op.drop_table("offers")

    op.drop_index("ix_projects_created_by", table_name="projects")
    op.drop_index("ix_projects_department_id", table_name="projects")
    op.drop_table("projects")

    op.drop_index("ix_departments_created_by", table_name="departments")
    op.drop_table("departments")

    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")

    postgresql.ENUM(name="offer_type").drop(op.get_bind(), checkfirst=True)
    postgresql.ENUM(name="user_role").drop(op.get_bind(), checkfirst=True)
