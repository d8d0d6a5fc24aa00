"""
Review Service

Course reviews and the course rating derived from them.
"""

import logging
from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.course import Course
from app.models.enrollment import Enrollment
from app.models.review import Review
from app.models.user import User
from app.schemas.review import ReviewCreate


logger = logging.getLogger(__name__)


MIN_RATING = 1
MAX_RATING = 5


def round_rating(value: float) -> float:
    """One decimal, half-up."""
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


async def _refresh_course_rating(course_id: int, db: AsyncSession) -> None:
    result = await db.execute(
        select(func.avg(Review.rating)).where(Review.course_id == course_id)
    )
    average = result.scalar_one_or_none()

    course = await db.get(Course, course_id)
    if course:
        course.rating = round_rating(average) if average is not None else 0.0


async def upsert_review(user: User, data: ReviewCreate, db: AsyncSession) -> Review:
    """
    Create or update the user's review of a course.

    Args:
        user: Reviewer.
        data: Course, rating and text.
        db: Database session.

    Returns:
        The stored review.

    Raises:
        HTTPException: 400 if the rating is outside 1-5, 403 if the user is
            not enrolled in the course.
    """
    if not MIN_RATING <= data.rating <= MAX_RATING:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Rating must be between 1 and 5",
        )

    result = await db.execute(
        select(Enrollment).where(
            Enrollment.user_id == user.id,
            Enrollment.course_id == data.course_id,
        )
    )
    enrollment = result.scalar_one_or_none()

    if not enrollment:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You must be enrolled in this course to review it",
        )

    result = await db.execute(
        select(Review).where(
            Review.user_id == user.id,
            Review.course_id == data.course_id,
        )
    )
    review = result.scalar_one_or_none()

    if review:
        review.rating = data.rating
        review.review = data.review
        review.updated_at = datetime.now(timezone.utc)
    else:
        review = Review(
            user_id=user.id,
            course_id=data.course_id,
            enrollment_id=enrollment.id,
            rating=data.rating,
            review=data.review,
        )
        db.add(review)

    await db.flush()
    await _refresh_course_rating(data.course_id, db)

    await db.commit()
    await db.refresh(review)

    logger.info("User %s rated course %s with %d", user.id, data.course_id, data.rating)
    return review


async def get_course_reviews(course_id: int, db: AsyncSession) -> List[dict]:
    """Reviews of a course, newest first, with the reviewer's name."""
    result = await db.execute(
        select(Review)
        .options(selectinload(Review.user))
        .where(Review.course_id == course_id)
        .order_by(Review.created_at.desc())
    )
    reviews = result.scalars().all()

    return [
        {
            "id": review.id,
            "user_id": review.user_id,
            "course_id": review.course_id,
            "enrollment_id": review.enrollment_id,
            "rating": review.rating,
            "review": review.review,
            "created_at": review.created_at,
            "updated_at": review.updated_at,
            "user_name": review.user.full_name if review.user else "Anonymous",
        }
        for review in reviews
    ]


async def get_rating_stats(course_id: int, db: AsyncSession) -> dict:
    """Average rating, review count and 1-5 distribution."""
    result = await db.execute(
        select(Review.rating, func.count(Review.id))
        .where(Review.course_id == course_id)
        .group_by(Review.rating)
    )
    distribution = {rating: 0 for rating in range(MIN_RATING, MAX_RATING + 1)}
    for rating, count in result.all():
        distribution[rating] = count

    total = sum(distribution.values())
    average = (
        round_rating(sum(r * c for r, c in distribution.items()) / total)
        if total
        else 0.0
    )

    return {
        "average_rating": average,
        "total_reviews": total,
        "rating_distribution": distribution,
    }


async def get_user_review(
    user: User,
    course_id: int,
    db: AsyncSession,
) -> Optional[Review]:
    result = await db.execute(
        select(Review).where(
            Review.user_id == user.id,
            Review.course_id == course_id,
        )
    )
    return result.scalar_one_or_none()
