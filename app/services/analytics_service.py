"""
Analytics Service

Per-course reporting for admins and course instructors.
"""

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.certificate import Certificate
from app.models.course import Course
from app.models.enrollment import Enrollment
from app.models.enums import EnrollmentStatus, UserRole
from app.models.review import Review
from app.models.user import User
from app.schemas.analytics import CourseAnalyticsResponse, StudentAnalyticsRow
from app.services.review_service import round_rating


async def get_course_analytics(
    user: User,
    course_id: int,
    db: AsyncSession,
) -> CourseAnalyticsResponse:
    """
    Get analytics for all students enrolled in a course.

    Args:
        user: Admin, or the instructor owning the course.
        course_id: Course ID.
        db: Database session.

    Returns:
        Aggregates plus one row per enrolled student.

    Raises:
        HTTPException: 404 if course not found.
        HTTPException: 403 if the user may not view this course.
    """
    # 1. Verify course ownership
    course = await db.get(Course, course_id)

    if not course:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Course not found",
        )

    if user.role != UserRole.ADMIN and course.instructor_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only view analytics for your own courses",
        )

    # 2. Enrollments with their students, eager loaded to avoid N+1 queries
    enrollments_result = await db.execute(
        select(Enrollment)
        .where(Enrollment.course_id == course_id)
        .options(selectinload(Enrollment.user))
        .order_by(Enrollment.enrolled_at)
    )
    enrollments = list(enrollments_result.scalars().all())

    # 3. Who already holds a certificate
    certified_result = await db.execute(
        select(Certificate.user_id).where(Certificate.course_id == course_id)
    )
    certified_users = set(certified_result.scalars().all())

    rows = [
        StudentAnalyticsRow(
            student_name=enrollment.user.full_name,
            user_email=enrollment.user.email,
            enrolled_at=enrollment.enrolled_at,
            status=enrollment.status,
            progress=enrollment.progress,
            certificate_issued=enrollment.user_id in certified_users,
        )
        for enrollment in enrollments
    ]

    total_enrollments = len(rows)
    completed = sum(1 for row in rows if row.status == EnrollmentStatus.COMPLETED)
    completion_rate = (
        round(sum(row.progress for row in rows) / total_enrollments, 1)
        if total_enrollments
        else 0.0
    )

    rating_result = await db.execute(
        select(func.avg(Review.rating)).where(Review.course_id == course_id)
    )
    average = rating_result.scalar_one_or_none()

    return CourseAnalyticsResponse(
        course_id=course_id,
        total_enrollments=total_enrollments,
        completed_enrollments=completed,
        completion_rate=completion_rate,
        average_rating=round_rating(average) if average is not None else None,
        enrollments=rows,
    )
