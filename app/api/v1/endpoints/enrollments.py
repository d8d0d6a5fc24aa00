"""
Enrollment Routes

Enrollment requests, student course lists and admin enrollment management.
"""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, require_admin
from app.core.database import get_db
from app.models.user import User
from app.schemas.progress import (
    EnrollmentCreate,
    EnrollmentResponse,
    EnrollmentStatusUpdate,
    EnrollmentWithCourse,
    EnrollmentWithDetails,
    LessonProgressResponse,
    RecalculateRequest,
    RecalculateResult,
)
from app.services import enrollment_service, progress_service


router = APIRouter(prefix="/enrollments", tags=["Enrollments"])


@router.post(
    "",
    response_model=EnrollmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Request enrollment in a course",
)
async def create_enrollment(
    data: EnrollmentCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """
    Create a PENDING enrollment. Access is granted once payment is verified.

    Raises:
        HTTPException: 409 if already enrolled.
    """
    return await enrollment_service.create_enrollment(current_user, data.course_id, db)


@router.get(
    "/me",
    response_model=List[EnrollmentWithCourse],
    summary="Get my enrollments",
)
async def get_my_enrollments(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """All courses the current user is enrolled in, with progress."""
    return await enrollment_service.get_user_enrollments(current_user, db)


@router.get(
    "",
    response_model=List[EnrollmentWithDetails],
    summary="List all enrollments (admin)",
)
async def list_enrollments(
    _: Annotated[User, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    return await enrollment_service.get_all_enrollments(db)


@router.post(
    "/recalculate",
    response_model=RecalculateResult,
    summary="Recalculate enrollment progress (admin)",
)
async def recalculate_progress(
    _: Annotated[User, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
    data: Optional[RecalculateRequest] = Body(None),
) -> RecalculateResult:
    """
    Recompute progress from completed lessons for one or all enrollments.

    Enrollments reaching 100% are marked COMPLETED and receive their
    certificate. Running it twice in a row changes nothing the second time.
    """
    enrollment_id = data.enrollment_id if data else None
    result = await progress_service.recalculate_enrollments(db, enrollment_id=enrollment_id)
    return RecalculateResult(**result)


@router.patch(
    "/{enrollment_id}/status",
    response_model=EnrollmentResponse,
    summary="Override enrollment status (admin)",
)
async def update_enrollment_status(
    enrollment_id: int,
    data: EnrollmentStatusUpdate,
    _: Annotated[User, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    return await enrollment_service.update_enrollment_status(enrollment_id, data.status, db)


@router.get(
    "/{enrollment_id}/progress",
    response_model=List[LessonProgressResponse],
    summary="Lesson progress of an enrollment",
)
async def get_enrollment_progress(
    enrollment_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    return await progress_service.get_enrollment_lesson_progress(enrollment_id, current_user, db)
