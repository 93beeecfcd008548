"""Department and project schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class DepartmentCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str = Field("", max_length=2000)


class DepartmentUpdate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = Field(None, max_length=2000)


class DepartmentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str
    created_by: str
    created_by_name: str | None = None
    created_at: datetime


class ProjectCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    department_id: UUID
    description: str = Field("", max_length=2000)


class ProjectUpdate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    department_id: UUID
    description: str | None = Field(None, max_length=2000)


class ProjectResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str
    department_id: str
    department_name: str | None = None
    created_by: str
    created_at: datetime
