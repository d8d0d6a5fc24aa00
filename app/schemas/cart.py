"""
Cart Schemas
"""

import uuid
from datetime import datetime

from pydantic import BaseModel

from app.schemas.course import CourseResponse


class CartItemCreate(BaseModel):
    """Schema for adding a course to the cart."""

    course_id: int


class CartItemResponse(BaseModel):
    """Cart entry with its course."""

    id: int
    user_id: uuid.UUID
    course_id: int
    added_at: datetime
    course: CourseResponse

    model_config = {"from_attributes": True}
