"""
Analytics Routes

Endpoints for course analytics.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_staff
from app.core.database import get_db
from app.models.user import User
from app.schemas.analytics import CourseAnalyticsResponse
from app.services import analytics_service


router = APIRouter(prefix="/courses", tags=["Analytics"])


@router.get(
    "/{course_id}/analytics",
    response_model=CourseAnalyticsResponse,
    summary="Get course student analytics",
)
async def get_course_analytics(
    course_id: int,
    current_user: Annotated[User, Depends(require_staff)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CourseAnalyticsResponse:
    """
    Get detailed analytics for a course.

    **Auth:** Admins, or the instructor who owns the course.

    **Returns:**
    - List of students enrolled
    - Progress percentage and status per student
    - Certificate status
    - Completion rate and average rating

    Args:
        course_id: Course ID.
        current_user: Authenticated instructor or admin.
        db: Database session.
    """
    return await analytics_service.get_course_analytics(
        user=current_user,
        course_id=course_id,
        db=db,
    )
