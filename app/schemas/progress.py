"""
Progress Schemas

Pydantic models for enrollments and lesson progress tracking.
"""

import uuid
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from app.models.enums import EnrollmentStatus
from app.schemas.course import CourseResponse
from app.schemas.user import UserResponse


# ============== Enrollment Schemas ==============

class EnrollmentCreate(BaseModel):
    """Schema for requesting enrollment in a course."""

    course_id: int = Field(..., description="Course to enroll in")


class EnrollmentStatusUpdate(BaseModel):
    """Schema for an admin overriding enrollment status."""

    status: EnrollmentStatus


class EnrollmentResponse(BaseModel):
    """Schema for enrollment response."""

    id: int
    user_id: uuid.UUID
    course_id: int
    status: EnrollmentStatus
    progress: int
    enrolled_at: datetime
    completed_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class EnrollmentWithCourse(EnrollmentResponse):
    """Enrollment with nested course data (student view)."""

    course: Optional[CourseResponse] = None


class EnrollmentWithDetails(EnrollmentWithCourse):
    """Enrollment with nested user and course (admin view)."""

    user: Optional[UserResponse] = None


class RecalculateRequest(BaseModel):
    """Optional single enrollment to recalculate; all when omitted."""

    enrollment_id: Optional[int] = None


class RecalculateResult(BaseModel):
    """Outcome of a progress recalculation batch."""

    message: str
    updated_ids: List[int]


# ============== Lesson Progress Schemas ==============

class LessonCompleteRequest(BaseModel):
    """Schema for marking a lesson as completed."""

    lesson_id: int = Field(..., description="Lesson being completed")
    watch_time_seconds: Optional[int] = Field(None, ge=0, description="Seconds of video watched")


class LessonProgressResponse(BaseModel):
    """Schema for a lesson progress record."""

    id: int
    user_id: uuid.UUID
    lesson_id: int
    enrollment_id: int
    completed: bool
    completed_at: Optional[datetime] = None
    watch_time_seconds: Optional[int] = None

    model_config = {"from_attributes": True}


class LessonCompleteResponse(BaseModel):
    """Result of completing a lesson: the record plus the updated enrollment."""

    lesson_progress: LessonProgressResponse
    enrollment: EnrollmentResponse
    course_completed: bool = Field(
        ..., description="True when this completion finished the course"
    )


class CourseCompletionSummary(BaseModel):
    """Completed lessons of a course for the current user."""

    course_id: int
    total_lessons: int
    completed_lessons: int
    completed_lesson_ids: List[int]
    is_all_completed: bool
