"""
Enrollment Service

Enrollment creation and administration.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Tuple

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.course import Course
from app.models.enrollment import Enrollment
from app.models.enums import CourseStatus, EnrollmentStatus
from app.models.user import User


logger = logging.getLogger(__name__)


async def create_enrollment(
    user: User,
    course_id: int,
    db: AsyncSession,
) -> Enrollment:
    """
    Request enrollment in a course.

    The enrollment starts PENDING and becomes ACTIVE once a payment for the
    course is verified.

    Args:
        user: Student enrolling.
        course_id: Course to enroll in.
        db: Database session.

    Returns:
        The new enrollment.

    Raises:
        HTTPException: 404 if the course is missing, 400 if it is not
            published, 409 if the user is already enrolled.
    """
    course = await db.get(Course, course_id)

    if not course:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Course not found",
        )

    if course.status != CourseStatus.PUBLISHED:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Course is not open for enrollment",
        )

    result = await db.execute(
        select(Enrollment).where(
            Enrollment.user_id == user.id,
            Enrollment.course_id == course_id,
        )
    )
    if result.scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Already enrolled in this course",
        )

    enrollment = Enrollment(
        user_id=user.id,
        course_id=course_id,
        status=EnrollmentStatus.PENDING,
        progress=0,
    )
    db.add(enrollment)
    await db.commit()
    await db.refresh(enrollment)

    logger.info("User %s requested enrollment in course %s", user.id, course_id)
    return enrollment


async def get_or_create_enrollment(
    user_id: uuid.UUID,
    course_id: int,
    db: AsyncSession,
) -> Tuple[Enrollment, bool]:
    """
    Fetch the (user, course) enrollment, creating a PENDING one if missing.

    The caller owns the commit.

    Returns:
        Tuple of (enrollment, created).
    """
    result = await db.execute(
        select(Enrollment).where(
            Enrollment.user_id == user_id,
            Enrollment.course_id == course_id,
        )
    )
    enrollment = result.scalar_one_or_none()

    if enrollment:
        return enrollment, False

    enrollment = Enrollment(
        user_id=user_id,
        course_id=course_id,
        status=EnrollmentStatus.PENDING,
        progress=0,
    )
    db.add(enrollment)
    await db.flush()
    return enrollment, True


async def get_user_enrollments(user: User, db: AsyncSession) -> List[Enrollment]:
    """Enrollments of a user with their course, newest first."""
    result = await db.execute(
        select(Enrollment)
        .options(selectinload(Enrollment.course))
        .where(Enrollment.user_id == user.id)
        .order_by(Enrollment.enrolled_at.desc())
    )
    return list(result.scalars().all())


async def get_all_enrollments(db: AsyncSession) -> List[Enrollment]:
    """Every enrollment with user and course (admin view)."""
    result = await db.execute(
        select(Enrollment)
        .options(selectinload(Enrollment.user), selectinload(Enrollment.course))
        .order_by(Enrollment.enrolled_at.desc())
    )
    return list(result.scalars().all())


async def update_enrollment_status(
    enrollment_id: int,
    new_status: EnrollmentStatus,
    db: AsyncSession,
) -> Enrollment:
    """
    Admin override of an enrollment's status.

    Raises:
        HTTPException: 404 if the enrollment does not exist.
    """
    enrollment = await db.get(Enrollment, enrollment_id)

    if not enrollment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Enrollment not found",
        )

    enrollment.status = new_status
    if new_status == EnrollmentStatus.COMPLETED and enrollment.completed_at is None:
        enrollment.completed_at = datetime.now(timezone.utc)

    await db.commit()
    await db.refresh(enrollment)

    logger.info("Enrollment %s status set to %s", enrollment_id, new_status.value)
    return enrollment
