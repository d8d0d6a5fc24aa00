"""
Analytics Schemas

Pydantic models for course analytics.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.models.enums import EnrollmentStatus


class StudentAnalyticsRow(BaseModel):
    """Schema for a single row in the student analytics table."""

    student_name: str = Field(..., description="Full name of the student")
    user_email: str = Field(..., description="Email of the student")
    enrolled_at: datetime = Field(..., description="Date when student enrolled")
    status: EnrollmentStatus = Field(..., description="Enrollment status")
    progress: int = Field(..., description="Percentage of lessons completed")
    certificate_issued: bool = Field(..., description="Whether a certificate has been issued")

    model_config = {"from_attributes": True}


class CourseAnalyticsResponse(BaseModel):
    """Schema for course analytics response."""

    course_id: int
    total_enrollments: int = Field(..., description="Total number of students enrolled")
    completed_enrollments: int = Field(..., description="Enrollments that reached 100%")
    completion_rate: float = Field(..., description="Average progress across all students")
    average_rating: Optional[float] = Field(None, description="Average review rating")
    enrollments: list[StudentAnalyticsRow] = Field(..., description="List of enrolled students")
