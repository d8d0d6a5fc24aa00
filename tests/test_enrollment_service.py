"""
Enrollment Service Unit Tests
"""

from types import SimpleNamespace

import pytest
from fastapi import HTTPException

import app.models  # noqa: F401
from app.models.enrollment import Enrollment
from app.models.enums import CourseStatus, EnrollmentStatus
from app.services import enrollment_service


class TestCreateEnrollment:
    """Tests for create_enrollment."""

    @pytest.mark.asyncio
    async def test_missing_course(self, mock_async_session, student):
        with pytest.raises(HTTPException) as exc_info:
            await enrollment_service.create_enrollment(student, 10, mock_async_session)

        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_draft_course_is_closed(self, mock_async_session, student):
        mock_async_session.get.return_value = SimpleNamespace(id=10, status=CourseStatus.DRAFT)

        with pytest.raises(HTTPException) as exc_info:
            await enrollment_service.create_enrollment(student, 10, mock_async_session)

        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_duplicate_enrollment(
        self, mock_async_session, student, make_enrollment, db_result
    ):
        mock_async_session.get.return_value = SimpleNamespace(id=10, status=CourseStatus.PUBLISHED)
        mock_async_session.execute.return_value = db_result(scalar=make_enrollment())

        with pytest.raises(HTTPException) as exc_info:
            await enrollment_service.create_enrollment(student, 10, mock_async_session)

        assert exc_info.value.status_code == 409

    @pytest.mark.asyncio
    async def test_new_enrollment_is_pending(self, mock_async_session, student, db_result):
        mock_async_session.get.return_value = SimpleNamespace(id=10, status=CourseStatus.PUBLISHED)
        mock_async_session.execute.return_value = db_result(scalar=None)

        enrollment = await enrollment_service.create_enrollment(student, 10, mock_async_session)

        assert isinstance(enrollment, Enrollment)
        assert enrollment.status == EnrollmentStatus.PENDING
        assert enrollment.progress == 0
        mock_async_session.commit.assert_awaited_once()


class TestGetOrCreateEnrollment:
    @pytest.mark.asyncio
    async def test_returns_existing(self, mock_async_session, student, make_enrollment, db_result):
        existing = make_enrollment()
        mock_async_session.execute.return_value = db_result(scalar=existing)

        enrollment, created = await enrollment_service.get_or_create_enrollment(
            student.id, 10, mock_async_session
        )

        assert enrollment is existing
        assert created is False
        mock_async_session.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_creates_missing(self, mock_async_session, student, db_result):
        mock_async_session.execute.return_value = db_result(scalar=None)

        enrollment, created = await enrollment_service.get_or_create_enrollment(
            student.id, 10, mock_async_session
        )

        assert created is True
        assert enrollment.user_id == student.id
        mock_async_session.flush.assert_awaited_once()
        mock_async_session.commit.assert_not_awaited()
