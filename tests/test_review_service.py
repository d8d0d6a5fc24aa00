"""
Review Service Unit Tests
"""

from types import SimpleNamespace

import pytest
from fastapi import HTTPException

import app.models  # noqa: F401
from app.models.review import Review
from app.schemas.review import ReviewCreate
from app.services import review_service


class TestRoundRating:
    @pytest.mark.parametrize(
        "value,expected",
        [(4.25, 4.3), (4.35, 4.4), (3.0, 3.0), (4.666666, 4.7)],
    )
    def test_half_up(self, value, expected):
        assert review_service.round_rating(value) == expected


class TestUpsertReview:
    """Tests for upsert_review."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("rating", [0, 6])
    async def test_rating_out_of_range(self, mock_async_session, student, rating):
        with pytest.raises(HTTPException) as exc_info:
            await review_service.upsert_review(
                student, ReviewCreate(course_id=10, rating=rating), mock_async_session
            )

        assert exc_info.value.status_code == 400
        mock_async_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_requires_enrollment(self, mock_async_session, student, db_result):
        mock_async_session.execute.return_value = db_result(scalar=None)

        with pytest.raises(HTTPException) as exc_info:
            await review_service.upsert_review(
                student, ReviewCreate(course_id=10, rating=5), mock_async_session
            )

        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    async def test_creates_review_and_updates_course_rating(
        self, mock_async_session, student, make_enrollment, db_result
    ):
        course = SimpleNamespace(id=10, rating=0.0)
        mock_async_session.execute.side_effect = [
            db_result(scalar=make_enrollment(id=3)),
            db_result(scalar=None),
            db_result(scalar=4.25),
        ]
        mock_async_session.get.return_value = course

        review = await review_service.upsert_review(
            student, ReviewCreate(course_id=10, rating=4, review="Clear and practical"),
            mock_async_session,
        )

        assert isinstance(review, Review)
        assert review.enrollment_id == 3
        assert review.rating == 4
        assert course.rating == 4.3
        mock_async_session.add.assert_called_once_with(review)
        mock_async_session.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_updates_existing_review(
        self, mock_async_session, student, make_enrollment, db_result
    ):
        existing = SimpleNamespace(rating=2, review="meh", updated_at=None)
        mock_async_session.execute.side_effect = [
            db_result(scalar=make_enrollment()),
            db_result(scalar=existing),
            db_result(scalar=5),
        ]

        review = await review_service.upsert_review(
            student, ReviewCreate(course_id=10, rating=5, review="Much better"),
            mock_async_session,
        )

        assert review is existing
        assert existing.rating == 5
        assert existing.updated_at is not None
        mock_async_session.add.assert_not_called()


class TestRatingStats:
    @pytest.mark.asyncio
    async def test_distribution_and_average(self, mock_async_session, db_result):
        mock_async_session.execute.return_value = db_result(rows=[(5, 3), (4, 1)])

        stats = await review_service.get_rating_stats(10, mock_async_session)

        assert stats["total_reviews"] == 4
        assert stats["rating_distribution"] == {1: 0, 2: 0, 3: 0, 4: 1, 5: 3}
        assert stats["average_rating"] == 4.8

    @pytest.mark.asyncio
    async def test_no_reviews(self, mock_async_session, db_result):
        mock_async_session.execute.return_value = db_result(rows=[])

        stats = await review_service.get_rating_stats(10, mock_async_session)

        assert stats["total_reviews"] == 0
        assert stats["average_rating"] == 0.0
