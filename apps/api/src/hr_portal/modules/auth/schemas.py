"""Authentication schemas."""

from pydantic import BaseModel, EmailStr


class LoginRequest(BaseModel):
    """Login request schema."""

    email: EmailStr
    password: str


class LoginUser(BaseModel):
    """User summary returned with the token."""

    id: str
    name: str
    email: str
    role: str


class LoginResponse(BaseModel):
    """Login response schema."""

    token: str
    token_type: str = "bearer"
    expires_in: int
    user: LoginUser
