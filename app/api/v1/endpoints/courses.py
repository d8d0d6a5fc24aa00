"""
Course Routes

Endpoints for the course catalog and lesson management.
"""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import require_admin, require_staff
from app.core.database import get_db
from app.models.enums import CourseLevel
from app.models.user import User
from app.schemas.course import (
    CourseCreate,
    CourseDetailResponse,
    CourseListResponse,
    CourseResponse,
    CourseUpdate,
    LessonCreate,
    LessonResponse,
    LessonUpdate,
)
from app.services import course_service


router = APIRouter(prefix="/courses", tags=["Courses"])
lessons_router = APIRouter(prefix="/lessons", tags=["Lessons"])


@router.post(
    "",
    response_model=CourseResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new course",
)
async def create_course(
    course_data: CourseCreate,
    current_user: Annotated[User, Depends(require_staff)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CourseResponse:
    """
    Create a new course in DRAFT status.

    **Requirements:**
    - User must be an instructor or admin

    Args:
        course_data: Catalog fields of the course.
        current_user: Authenticated instructor or admin.
        db: Database session.

    Returns:
        The created course.
    """
    return await course_service.create_course(current_user, course_data, db)


@router.get(
    "",
    response_model=CourseListResponse,
    summary="List published courses",
)
async def list_courses(
    db: Annotated[AsyncSession, Depends(get_db)],
    page: int = Query(1, ge=1, description="Page number"),
    size: int = Query(20, ge=1, le=100, description="Items per page"),
    search: Optional[str] = Query(None, description="Search title, description or category"),
    category: Optional[str] = Query(None, description="Filter by category"),
    level: Optional[CourseLevel] = Query(None, description="Filter by level"),
) -> CourseListResponse:
    """
    Get a paginated list of published courses.

    Public endpoint, no authentication required.
    """
    courses, total = await course_service.get_published_courses(
        db=db,
        page=page,
        size=size,
        search=search,
        category=category,
        level=level,
    )

    return CourseListResponse(
        items=[CourseResponse.model_validate(c) for c in courses],
        total=total,
        page=page,
        size=size,
        pages=course_service.page_count(total, size),
    )


@router.get(
    "/all",
    response_model=List[CourseResponse],
    summary="List every course regardless of status (admin)",
)
async def list_all_courses(
    _: Annotated[User, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    return await course_service.get_all_courses(db)


@router.get(
    "/{course_id}",
    response_model=CourseDetailResponse,
    summary="Get course details with lessons",
)
async def get_course(
    course_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """
    Get a course with its lessons ordered by position.

    Raises:
        HTTPException: 404 if course not found.
    """
    return await course_service.get_course_with_lessons(course_id, db)


@router.patch(
    "/{course_id}",
    response_model=CourseResponse,
    summary="Update a course",
)
async def update_course(
    course_id: int,
    course_data: CourseUpdate,
    current_user: Annotated[User, Depends(require_staff)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """Only provided fields are updated. Instructors may edit their own courses only."""
    return await course_service.update_course(course_id, current_user, course_data, db)


@router.delete(
    "/{course_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a course",
)
async def delete_course(
    course_id: int,
    current_user: Annotated[User, Depends(require_staff)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    await course_service.delete_course(course_id, current_user, db)


@router.get(
    "/{course_id}/lessons",
    response_model=List[LessonResponse],
    summary="List lessons of a course",
)
async def list_lessons(
    course_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    return await course_service.get_course_lessons(course_id, db)


@router.post(
    "/{course_id}/lessons",
    response_model=LessonResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a lesson to a course",
)
async def create_lesson(
    course_id: int,
    lesson_data: LessonCreate,
    current_user: Annotated[User, Depends(require_staff)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    return await course_service.create_lesson(course_id, current_user, lesson_data, db)


# ============== Lessons ==============

@lessons_router.get(
    "/{lesson_id}",
    response_model=LessonResponse,
    summary="Get a lesson",
)
async def get_lesson(
    lesson_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    return await course_service.get_lesson(lesson_id, db)


@lessons_router.patch(
    "/{lesson_id}",
    response_model=LessonResponse,
    summary="Update a lesson",
)
async def update_lesson(
    lesson_id: int,
    lesson_data: LessonUpdate,
    current_user: Annotated[User, Depends(require_staff)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    return await course_service.update_lesson(lesson_id, current_user, lesson_data, db)


@lessons_router.delete(
    "/{lesson_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a lesson",
)
async def delete_lesson(
    lesson_id: int,
    current_user: Annotated[User, Depends(require_staff)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    await course_service.delete_lesson(lesson_id, current_user, db)
