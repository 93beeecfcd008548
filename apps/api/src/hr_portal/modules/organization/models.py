"""
Organization Models

Departments and projects group the offers a publisher creates. Both are
scoped to their creator: two publishers may each have a department named
"Finance".
"""

from sqlalchemy import ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hr_portal.modules.shared import BaseModel


class Department(BaseModel):
    __tablename__ = "departments"
    __table_args__ = (UniqueConstraint("name", "created_by", name="uq_departments_name_created_by"),)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    created_by: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Department(id={self.id}, name={self.name})>"


class Project(BaseModel):
    __tablename__ = "projects"
    __table_args__ = (
        UniqueConstraint(
            "name",
            "department_id",
            "created_by",
            name="uq_projects_name_department_created_by",
        ),
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    department_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("departments.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    created_by: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    department: Mapped[Department] = relationship("Department", lazy="joined")

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, name={self.name})>"
