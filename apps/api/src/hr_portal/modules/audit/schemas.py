"""Audit log and admin tool schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class AuditLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    message: str
    created_at: datetime


class TestEmailRequest(BaseModel):
    """Request body for POST /test-email."""

    to: EmailStr
    subject: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=5000)


class MessageResponse(BaseModel):
    message: str
