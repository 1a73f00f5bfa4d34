"""Identity schemas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.core.enums import RoleEnum


class RoleRead(BaseModel):
    """Role response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: RoleEnum


class UserCreate(BaseModel):
    """User registration request."""

    email: EmailStr
    password: str = Field(min_length=8, max_length=72)
    name: str = Field(min_length=1, max_length=255)
    company: str | None = Field(default=None, max_length=255)
    mobile: str | None = Field(default=None, max_length=32)


class LoginRequest(BaseModel):
    """Credentials for login."""

    email: EmailStr
    password: str


class AccessToken(BaseModel):
    """Bearer token response."""

    access_token: str
    token_type: str = "bearer"


class DeviceTokenUpdate(BaseModel):
    """Register or clear the push device token of the current user."""

    device_token: str | None = Field(default=None, max_length=512)


class UserRead(BaseModel):
    """User output schema."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: EmailStr
    name: str
    company: str | None
    mobile: str | None
    is_active: bool
    role: RoleRead
    created_at: datetime
    updated_at: datetime


class UserSummaryRead(BaseModel):
    """Public profile of a booking counterpart."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    email: str
    company: str | None
    mobile: str | None
