"""
Course Service

Business logic for the course catalog and course lessons.
"""

import logging
import math
from typing import List, Optional, Tuple

from fastapi import HTTPException, status
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.course import Course
from app.models.enums import (
    CourseLevel,
    CourseStatus,
    NotificationPreference,
    NotificationType,
    UserRole,
)
from app.models.lesson import Lesson
from app.models.user import User
from app.schemas.course import CourseCreate, CourseUpdate, LessonCreate, LessonUpdate
from app.services import notification_service


logger = logging.getLogger(__name__)


def ensure_can_manage(course: Course, user: User) -> None:
    """
    Admins manage every course, instructors only their own.

    Raises:
        HTTPException: 403 otherwise.
    """
    if user.role == UserRole.ADMIN:
        return
    if user.role == UserRole.INSTRUCTOR and course.instructor_id == user.id:
        return
    raise HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail="You can only manage your own courses",
    )


# ============== Courses ==============

async def get_course_by_id(course_id: int, db: AsyncSession) -> Course:
    """
    Raises:
        HTTPException: 404 if not found.
    """
    course = await db.get(Course, course_id)

    if not course:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Course not found",
        )

    return course


async def get_course_with_lessons(course_id: int, db: AsyncSession) -> Course:
    """Course with lessons ordered by position."""
    result = await db.execute(
        select(Course)
        .options(selectinload(Course.lessons))
        .where(Course.id == course_id)
    )
    course = result.scalar_one_or_none()

    if not course:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Course not found",
        )

    return course


async def get_published_courses(
    db: AsyncSession,
    page: int = 1,
    size: int = 20,
    search: Optional[str] = None,
    category: Optional[str] = None,
    level: Optional[CourseLevel] = None,
) -> Tuple[List[Course], int]:
    """
    Paginated catalog of published courses.

    Args:
        db: Database session.
        page: 1-based page number.
        size: Page size.
        search: Case-insensitive match on title, description or category.
        category: Exact category filter.
        level: Level filter.

    Returns:
        Tuple of (courses, total_count).
    """
    conditions = [Course.status == CourseStatus.PUBLISHED]

    if search:
        pattern = f"%{search}%"
        conditions.append(
            or_(
                Course.title.ilike(pattern),
                Course.description.ilike(pattern),
                Course.category.ilike(pattern),
            )
        )
    if category:
        conditions.append(Course.category == category)
    if level:
        conditions.append(Course.level == level)

    count_result = await db.execute(
        select(func.count(Course.id)).where(*conditions)
    )
    total = count_result.scalar_one()

    result = await db.execute(
        select(Course)
        .where(*conditions)
        .order_by(Course.created_at.desc(), Course.id.desc())
        .offset((page - 1) * size)
        .limit(size)
    )
    return list(result.scalars().all()), total


def page_count(total: int, size: int) -> int:
    return math.ceil(total / size) if size else 0


async def get_all_courses(db: AsyncSession) -> List[Course]:
    """Every course regardless of status (admin view)."""
    result = await db.execute(select(Course).order_by(Course.created_at.desc()))
    return list(result.scalars().all())


async def create_course(user: User, data: CourseCreate, db: AsyncSession) -> Course:
    """
    Create a DRAFT course.

    Instructors become the owner. ``instructor_name`` defaults to the
    creator's name.
    """
    values = data.model_dump()
    values["instructor_name"] = data.instructor_name or user.full_name

    course = Course(
        **values,
        instructor_id=user.id if user.role == UserRole.INSTRUCTOR else None,
        status=CourseStatus.DRAFT,
        total_students=0,
        rating=0.0,
    )
    db.add(course)
    await db.commit()
    await db.refresh(course)

    logger.info("Course %s created by %s", course.id, user.id)
    return course


async def update_course(
    course_id: int,
    user: User,
    data: CourseUpdate,
    db: AsyncSession,
) -> Course:
    """
    Partially update a course.

    Publishing a course notifies users who opted in to new lessons.

    Raises:
        HTTPException: 404 if missing, 403 if not allowed to manage it.
    """
    course = await get_course_by_id(course_id, db)
    ensure_can_manage(course, user)

    changes = data.model_dump(exclude_unset=True)
    was_published = course.status == CourseStatus.PUBLISHED

    for field, value in changes.items():
        setattr(course, field, value)

    if not was_published and course.status == CourseStatus.PUBLISHED:
        await notification_service.broadcast(
            db,
            preference=NotificationPreference.NEW_LESSONS.value,
            type=NotificationType.COURSE,
            title="New course available",
            message=f'"{course.title}" is now available.',
            icon="book-open",
            related_id=str(course.id),
            details={"action": "create", "entity": "course"},
        )

    await db.commit()
    await db.refresh(course)
    return course


async def delete_course(course_id: int, user: User, db: AsyncSession) -> None:
    course = await get_course_by_id(course_id, db)
    ensure_can_manage(course, user)

    await db.delete(course)
    await db.commit()
    logger.info("Course %s deleted by %s", course_id, user.id)


# ============== Lessons ==============

async def get_course_lessons(course_id: int, db: AsyncSession) -> List[Lesson]:
    """Lessons of a course ordered by position."""
    await get_course_by_id(course_id, db)

    result = await db.execute(
        select(Lesson)
        .where(Lesson.course_id == course_id)
        .order_by(Lesson.position, Lesson.id)
    )
    return list(result.scalars().all())


async def get_lesson(lesson_id: int, db: AsyncSession) -> Lesson:
    lesson = await db.get(Lesson, lesson_id)

    if not lesson:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Lesson not found",
        )

    return lesson


async def create_lesson(
    course_id: int,
    user: User,
    data: LessonCreate,
    db: AsyncSession,
) -> Lesson:
    course = await get_course_by_id(course_id, db)
    ensure_can_manage(course, user)

    lesson = Lesson(course_id=course_id, **data.model_dump())
    db.add(lesson)
    await db.commit()
    await db.refresh(lesson)

    logger.info("Lesson %s added to course %s", lesson.id, course_id)
    return lesson


async def update_lesson(
    lesson_id: int,
    user: User,
    data: LessonUpdate,
    db: AsyncSession,
) -> Lesson:
    lesson = await get_lesson(lesson_id, db)
    course = await get_course_by_id(lesson.course_id, db)
    ensure_can_manage(course, user)

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(lesson, field, value)

    await db.commit()
    await db.refresh(lesson)
    return lesson


async def delete_lesson(lesson_id: int, user: User, db: AsyncSession) -> None:
    lesson = await get_lesson(lesson_id, db)
    course = await get_course_by_id(lesson.course_id, db)
    ensure_can_manage(course, user)

    await db.delete(lesson)
    await db.commit()
    logger.info("Lesson %s deleted from course %s", lesson_id, lesson.course_id)
