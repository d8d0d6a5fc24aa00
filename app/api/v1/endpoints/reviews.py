"""
Review Routes

Course reviews and rating statistics.
"""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user
from app.core.database import get_db
from app.models.user import User
from app.schemas.review import RatingStats, ReviewCreate, ReviewResponse, ReviewWithUser
from app.services import review_service


router = APIRouter(prefix="/reviews", tags=["Reviews"])


@router.post(
    "",
    response_model=ReviewResponse,
    summary="Create or update my review of a course",
)
async def upsert_review(
    data: ReviewCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """
    Submit a rating (1-5) and optional text. A second submission for the
    same course replaces the first. The course rating is recomputed.

    Raises:
        HTTPException: 400 for an out-of-range rating, 403 if not enrolled.
    """
    return await review_service.upsert_review(current_user, data, db)


@router.get(
    "/courses/{course_id}",
    response_model=List[ReviewWithUser],
    summary="List reviews of a course",
)
async def list_course_reviews(
    course_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
):
    return await review_service.get_course_reviews(course_id, db)


@router.get(
    "/courses/{course_id}/stats",
    response_model=RatingStats,
    summary="Rating statistics of a course",
)
async def get_rating_stats(
    course_id: int,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> RatingStats:
    return RatingStats(**await review_service.get_rating_stats(course_id, db))


@router.get(
    "/courses/{course_id}/me",
    response_model=Optional[ReviewResponse],
    summary="Get my review of a course",
)
async def get_my_review(
    course_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    return await review_service.get_user_review(current_user, course_id, db)
