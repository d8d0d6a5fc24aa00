"""
Certificate Schemas

Pydantic models for certificates, PDF preview requests and branding.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.schemas.course import CourseResponse


class CertificateClaim(BaseModel):
    """Schema for claiming the certificate of a completed enrollment."""

    enrollment_id: int


class CertificateResponse(BaseModel):
    """Schema for certificate response."""

    id: uuid.UUID
    user_id: uuid.UUID
    course_id: int
    enrollment_id: int
    certificate_number: str
    issued_at: datetime
    pdf_url: Optional[str] = None

    model_config = {"from_attributes": True}


class CertificateWithCourse(CertificateResponse):
    """Certificate with nested course data."""

    course: Optional[CourseResponse] = None


class CertificateVerification(BaseModel):
    """Public verification view of a certificate."""

    valid: bool
    certificate_number: str
    student_name: str
    course_title: str
    issued_at: datetime


class CertificatePreviewRequest(BaseModel):
    """
    Ad-hoc certificate rendering request.

    Required fields are validated by the endpoint so that a missing value
    yields a 400 rather than a 422.
    """

    student_name: Optional[str] = None
    course_name: Optional[str] = None
    certificate_number: Optional[str] = None
    instructor_name: Optional[str] = None
    duration: Optional[str] = None


class CertificateBranding(BaseModel):
    """Theme colour and logo (data URL) used when rendering certificates."""

    theme_color: str = Field(..., description="Hex colour, e.g. #2563eb")
    logo_url: Optional[str] = Field(None, description="Logo as a data: URL")
