"""
User Pydantic schemas.
"""

from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.core.security import PASSWORD_MIN_LENGTH, PASSWORD_MAX_LENGTH
from app.schemas.base import TimestampedRead


class AccountCreate(BaseModel):
    """Schema for sign-up and for admin-created accounts."""

    email: EmailStr
    password: str = Field(..., min_length=PASSWORD_MIN_LENGTH, max_length=PASSWORD_MAX_LENGTH)
    full_name: str = Field(..., min_length=1, max_length=100)

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("full_name", mode="before")
    @classmethod
    def strip_full_name(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v


class SignUpRequest(AccountCreate):
    """Schema for public sign-up. The account starts without a role."""


class AdminCreate(AccountCreate):
    """Schema for a super admin creating a sub admin."""


class UserRead(TimestampedRead):
    """Schema for reading user data (API response)."""

    email: str
    full_name: str
    role: Optional[str] = None
    is_active: bool


class AdminRead(UserRead):
    """Sub admin with the number of candidates they added."""

    candidate_count: int = 0


class LoginRequest(BaseModel):
    """Schema for login request."""

    email: EmailStr
    password: str

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v


class LoginResponse(BaseModel):
    """Schema for login response."""

    access_token: str
    token_type: str = "bearer"
    user: UserRead

