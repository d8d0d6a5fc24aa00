"""
Setting Schemas

Pydantic models for global key/value settings.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class SettingUpdate(BaseModel):
    """Schema for setting a value."""

    value: str


class SettingResponse(BaseModel):
    """Schema for a single setting."""

    key: str
    value: str
    updated_at: datetime

    model_config = {"from_attributes": True}


class BrandingResponse(BaseModel):
    """Public branding view of the settings table."""

    platform_name: str = Field(..., description="Defaults to 'Edu Learn'")
    logo_url: Optional[str] = None
    primary_color: str
    tagline: Optional[str] = None
