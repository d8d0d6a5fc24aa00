"""
Review Schemas

Pydantic models for course reviews and rating statistics.
"""

import uuid
from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, Field


class ReviewCreate(BaseModel):
    """
    Schema for creating or updating the current user's review of a course.

    Rating bounds are enforced by the service so out-of-range values
    return 400.
    """

    course_id: int
    rating: int
    review: str = Field(default="", max_length=5000)


class ReviewResponse(BaseModel):
    """Schema for review response."""

    id: int
    user_id: uuid.UUID
    course_id: int
    enrollment_id: int
    rating: int
    review: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ReviewWithUser(ReviewResponse):
    """Review with reviewer display name."""

    user_name: str


class RatingStats(BaseModel):
    """Aggregate rating for a course."""

    average_rating: float
    total_reviews: int
    rating_distribution: Dict[int, int]
