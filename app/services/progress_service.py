"""
Progress Service

Lesson completion tracking and enrollment progress.

Every change to an enrollment's progress goes through
``apply_progress``, which is shared by lesson completion and the admin
recalculation batch.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.enrollment import Enrollment
from app.models.enums import EnrollmentStatus, UserRole
from app.models.lesson import Lesson
from app.models.lesson_progress import LessonProgress
from app.models.user import User
from app.services import certificate_service
from app.services.progress_rules import evaluate_progress


logger = logging.getLogger(__name__)


# ============== Queries ==============

async def get_enrollment(enrollment_id: int, db: AsyncSession) -> Optional[Enrollment]:
    result = await db.execute(select(Enrollment).where(Enrollment.id == enrollment_id))
    return result.scalar_one_or_none()


async def get_user_enrollment(
    user_id: uuid.UUID,
    course_id: int,
    db: AsyncSession,
) -> Optional[Enrollment]:
    result = await db.execute(
        select(Enrollment).where(
            Enrollment.user_id == user_id,
            Enrollment.course_id == course_id,
        )
    )
    return result.scalar_one_or_none()


async def count_course_lessons(course_id: int, db: AsyncSession) -> int:
    result = await db.execute(
        select(func.count(Lesson.id)).where(Lesson.course_id == course_id)
    )
    return result.scalar_one()


async def count_completed_lessons(enrollment: Enrollment, db: AsyncSession) -> int:
    """Completed lessons of this enrollment that still belong to its course."""
    result = await db.execute(
        select(func.count(LessonProgress.id))
        .join(Lesson, Lesson.id == LessonProgress.lesson_id)
        .where(
            LessonProgress.enrollment_id == enrollment.id,
            LessonProgress.completed.is_(True),
            Lesson.course_id == enrollment.course_id,
        )
    )
    return result.scalar_one()


# ============== Progress updates ==============

async def apply_progress(enrollment: Enrollment, db: AsyncSession) -> bool:
    """
    Recompute an enrollment's progress and apply any change.

    When the enrollment reaches 100% for the first time it is marked
    COMPLETED and its certificate is issued. Nothing is written when
    neither progress nor status changes.

    Args:
        enrollment: Enrollment to evaluate.
        db: Database session (not committed here).

    Returns:
        True if the enrollment was modified.
    """
    total = await count_course_lessons(enrollment.course_id, db)
    completed = await count_completed_lessons(enrollment, db)
    evaluation = evaluate_progress(completed, total, enrollment.status)

    if evaluation.progress == enrollment.progress and not evaluation.completes:
        return False

    enrollment.progress = evaluation.progress

    if evaluation.completes:
        enrollment.status = evaluation.new_status
        enrollment.completed_at = datetime.now(timezone.utc)
        await db.flush()
        logger.info("Enrollment %s completed", enrollment.id)
        await certificate_service.issue_certificate(enrollment, db)

    return True


async def update_enrollment_progress(
    enrollment_id: int,
    db: AsyncSession,
) -> Optional[Enrollment]:
    """
    Recompute progress for one enrollment.

    Returns:
        The enrollment, or None when it does not exist (no-op).
    """
    enrollment = await get_enrollment(enrollment_id, db)
    if enrollment is None:
        logger.debug("Enrollment %s not found, skipping progress update", enrollment_id)
        return None

    await apply_progress(enrollment, db)
    return enrollment


async def recalculate_enrollments(
    db: AsyncSession,
    enrollment_id: Optional[int] = None,
) -> dict:
    """
    Recompute progress for one enrollment or for all of them.

    Idempotent: a second run without new completions modifies nothing.

    Returns:
        ``{"message": ..., "updated_ids": [...]}``
    """
    if enrollment_id is not None:
        enrollment = await get_enrollment(enrollment_id, db)
        enrollments = [enrollment] if enrollment else []
    else:
        result = await db.execute(select(Enrollment).order_by(Enrollment.id))
        enrollments = list(result.scalars().all())

    updated_ids = []
    for enrollment in enrollments:
        if await apply_progress(enrollment, db):
            updated_ids.append(enrollment.id)

    await db.commit()

    logger.info("Recalculated %d of %d enrollments", len(updated_ids), len(enrollments))
    return {
        "message": f"Recalculated {len(updated_ids)} enrollments",
        "updated_ids": updated_ids,
    }


# ============== Lesson completion ==============

async def mark_lesson_completed(
    user: User,
    lesson_id: int,
    db: AsyncSession,
    watch_time_seconds: Optional[int] = None,
) -> Tuple[LessonProgress, Enrollment, bool]:
    """
    Mark a lesson as completed for the current user.

    Flow:
    1. Resolve the lesson and the user's enrollment in its course.
    2. Upsert the (user, lesson) progress record.
    3. Recompute enrollment progress, issuing the certificate on completion.

    Args:
        user: Student completing the lesson.
        lesson_id: Lesson ID.
        db: Database session.
        watch_time_seconds: Optional watch time to record.

    Returns:
        Tuple of (lesson_progress, enrollment, course_completed).

    Raises:
        HTTPException: 404 if lesson or enrollment missing, 403 while the
            enrollment is still awaiting payment.
    """
    lesson = await db.get(Lesson, lesson_id)

    if not lesson:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Lesson not found",
        )

    enrollment = await get_user_enrollment(user.id, lesson.course_id, db)

    if not enrollment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Not enrolled in this course",
        )

    if enrollment.status == EnrollmentStatus.PENDING:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Enrollment is awaiting payment verification",
        )

    result = await db.execute(
        select(LessonProgress).where(
            LessonProgress.user_id == user.id,
            LessonProgress.lesson_id == lesson_id,
        )
    )
    record = result.scalar_one_or_none()
    now = datetime.now(timezone.utc)

    if record:
        record.completed = True
        record.completed_at = now
        record.enrollment_id = enrollment.id
        if watch_time_seconds is not None:
            record.watch_time_seconds = watch_time_seconds
    else:
        record = LessonProgress(
            user_id=user.id,
            lesson_id=lesson_id,
            enrollment_id=enrollment.id,
            completed=True,
            completed_at=now,
            watch_time_seconds=watch_time_seconds,
        )
        db.add(record)

    await db.flush()

    was_completed = enrollment.status == EnrollmentStatus.COMPLETED
    await apply_progress(enrollment, db)
    course_completed = not was_completed and enrollment.status == EnrollmentStatus.COMPLETED

    await db.commit()
    await db.refresh(record)

    return record, enrollment, course_completed


async def get_enrollment_lesson_progress(
    enrollment_id: int,
    user: User,
    db: AsyncSession,
) -> List[LessonProgress]:
    """
    Progress records of an enrollment.

    Raises:
        HTTPException: 404 if missing, 403 if it belongs to someone else.
    """
    enrollment = await get_enrollment(enrollment_id, db)

    if not enrollment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Enrollment not found",
        )

    if enrollment.user_id != user.id and user.role != UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to view this enrollment",
        )

    result = await db.execute(
        select(LessonProgress)
        .where(LessonProgress.enrollment_id == enrollment_id)
        .order_by(LessonProgress.id)
    )
    return list(result.scalars().all())


async def get_course_completion(
    user: User,
    course_id: int,
    db: AsyncSession,
) -> dict:
    """Which lessons of a course the user has completed."""
    lesson_result = await db.execute(
        select(Lesson.id).where(Lesson.course_id == course_id)
    )
    lesson_ids = list(lesson_result.scalars().all())

    completed_ids: List[int] = []
    if lesson_ids:
        progress_result = await db.execute(
            select(LessonProgress.lesson_id).where(
                LessonProgress.user_id == user.id,
                LessonProgress.lesson_id.in_(lesson_ids),
                LessonProgress.completed.is_(True),
            )
        )
        completed_ids = list(progress_result.scalars().all())

    return {
        "course_id": course_id,
        "total_lessons": len(lesson_ids),
        "completed_lessons": len(completed_ids),
        "completed_lesson_ids": completed_ids,
        "is_all_completed": bool(lesson_ids) and len(completed_ids) == len(lesson_ids),
    }
