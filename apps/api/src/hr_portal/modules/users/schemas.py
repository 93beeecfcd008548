"""User management schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from hr_portal.modules.users.models import UserRole


class UserCreate(BaseModel):
    """Request body for POST /users."""

    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    role: UserRole


class UserUpdate(BaseModel):
    """Request body for PUT /users/{id}. Password is only changed when given."""

    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    role: UserRole
    password: str | None = Field(None, min_length=8, max_length=128)


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    role: UserRole
    created_at: datetime
