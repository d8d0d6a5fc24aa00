"""
User Schemas

Pydantic models for user request/response validation.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.models.enums import UserRole


# Longest input bcrypt accepts
MAX_PASSWORD_BYTES = 72


def check_password_length(value: str) -> str:
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    return value


class UserCreate(BaseModel):
    """Schema for registering a new student account."""

    full_name: str = Field(..., min_length=1, max_length=255, description="User's full name")
    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=8, description="Password (min 8 characters)")

    validate_password_length = field_validator("password")(check_password_length)


class UserResponse(BaseModel):
    """Schema for user response (excludes password)."""

    id: uuid.UUID
    email: str
    full_name: str
    role: UserRole
    avatar_url: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    bio: Optional[str] = None
    notification_preferences: Optional[dict] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class UserUpdate(BaseModel):
    """Schema for updating a user profile. Only provided fields are applied."""

    full_name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    avatar_url: Optional[str] = Field(None, max_length=512)
    phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = None
    bio: Optional[str] = None


class UserLogin(BaseModel):
    """Schema for user login request."""

    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., description="User's password")


class PasswordChange(BaseModel):
    """Schema for a user changing their own password."""

    current_password: str
    new_password: str = Field(..., min_length=8)

    validate_password_length = field_validator("new_password")(check_password_length)


class PasswordReset(BaseModel):
    """Schema for an admin setting another user's password."""

    new_password: str = Field(..., min_length=8)

    validate_password_length = field_validator("new_password")(check_password_length)


class NotificationPreferences(BaseModel):
    """Per-channel notification opt-ins."""

    course_updates: bool = True
    new_lessons: bool = True
    promotions: bool = True
