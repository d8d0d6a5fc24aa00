"""
Progress Routes

Endpoints for marking lessons complete and reading course completion.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.core.database import get_db
from app.models.user import User
from app.schemas.progress import (
    CourseCompletionSummary,
    EnrollmentResponse,
    LessonCompleteRequest,
    LessonCompleteResponse,
    LessonProgressResponse,
)
from app.services import progress_service


router = APIRouter(prefix="/progress", tags=["Progress"])


@router.post(
    "/complete",
    response_model=LessonCompleteResponse,
    summary="Mark a lesson as completed",
)
async def complete_lesson(
    data: LessonCompleteRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> LessonCompleteResponse:
    """
    Mark a lesson as completed.

    **Flow:**
    1. Upsert the lesson progress record
    2. Recompute the enrollment's progress
    3. On reaching 100%: mark the enrollment COMPLETED and issue the certificate

    Args:
        data: Lesson ID and optional watch time.
        current_user: Authenticated student.
        db: Database session.

    Returns:
        The progress record, the updated enrollment and whether this
        completion finished the course.
    """
    record, enrollment, course_completed = await progress_service.mark_lesson_completed(
        user=current_user,
        lesson_id=data.lesson_id,
        db=db,
        watch_time_seconds=data.watch_time_seconds,
    )

    return LessonCompleteResponse(
        lesson_progress=LessonProgressResponse.model_validate(record),
        enrollment=EnrollmentResponse.model_validate(enrollment),
        course_completed=course_completed,
    )


@router.get(
    "/courses/{course_id}",
    response_model=CourseCompletionSummary,
    summary="Completed lessons of a course",
)
async def get_course_completion(
    course_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CourseCompletionSummary:
    summary = await progress_service.get_course_completion(current_user, course_id, db)
    return CourseCompletionSummary(**summary)
