"""
Course Schemas

Pydantic models for course and lesson request/response validation.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional, List

from pydantic import BaseModel, Field

from app.models.enums import CourseLevel, CourseStatus


# ============== Lesson Schemas ==============

class LessonBase(BaseModel):
    """Base schema for lesson data."""

    title: str = Field(..., min_length=1, max_length=500)
    description: str = Field(default="")
    video_url: Optional[str] = Field(default=None, max_length=512)
    duration_minutes: int = Field(default=0, ge=0, description="Lesson length in minutes")
    position: int = Field(default=0, ge=0, description="Ordering key within the course")
    content: Optional[str] = None


class LessonCreate(LessonBase):
    """Schema for creating a lesson."""


class LessonUpdate(BaseModel):
    """Schema for partially updating a lesson."""

    title: Optional[str] = Field(None, min_length=1, max_length=500)
    description: Optional[str] = None
    video_url: Optional[str] = Field(None, max_length=512)
    duration_minutes: Optional[int] = Field(None, ge=0)
    position: Optional[int] = Field(None, ge=0)
    content: Optional[str] = None


class LessonResponse(LessonBase):
    """Schema for lesson response."""

    id: int
    course_id: int
    created_at: datetime

    model_config = {"from_attributes": True}


# ============== Course Schemas ==============

class CourseBase(BaseModel):
    """Fields shared by create and response schemas."""

    title: str = Field(..., min_length=1, max_length=500)
    description: str = Field(default="")
    category: str = Field(..., min_length=1, max_length=100)
    level: CourseLevel = CourseLevel.BEGINNER
    price: Decimal = Field(default=Decimal("0"), ge=0)
    thumbnail_url: Optional[str] = Field(default=None, max_length=512)
    duration: Optional[str] = Field(default=None, max_length=100)
    certificate_template: Optional[str] = Field(default=None, max_length=512)
    preview_video_url: Optional[str] = Field(default=None, max_length=512)


class CourseCreate(CourseBase):
    """
    Schema for creating a course.

    ``instructor_name`` defaults to the creating user's name.
    """

    instructor_name: Optional[str] = Field(default=None, max_length=255)


class CourseUpdate(BaseModel):
    """Schema for partially updating a course."""

    title: Optional[str] = Field(None, min_length=1, max_length=500)
    description: Optional[str] = None
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    level: Optional[CourseLevel] = None
    price: Optional[Decimal] = Field(None, ge=0)
    thumbnail_url: Optional[str] = Field(None, max_length=512)
    instructor_name: Optional[str] = Field(None, max_length=255)
    duration: Optional[str] = Field(None, max_length=100)
    status: Optional[CourseStatus] = None
    certificate_template: Optional[str] = Field(None, max_length=512)
    preview_video_url: Optional[str] = Field(None, max_length=512)


class CourseResponse(CourseBase):
    """Schema for course response."""

    id: int
    instructor_id: Optional[uuid.UUID] = None
    instructor_name: str
    total_students: int
    rating: float
    status: CourseStatus
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class CourseDetailResponse(CourseResponse):
    """Course with its ordered lessons."""

    lessons: List[LessonResponse] = []


class CourseListResponse(BaseModel):
    """Schema for paginated course list."""

    items: List[CourseResponse]
    total: int
    page: int
    size: int
    pages: int
