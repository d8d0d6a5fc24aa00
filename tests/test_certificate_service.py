"""
Certificate Service Unit Tests

Tests for certificate numbering, idempotent issuance and claiming.
"""

import uuid
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest
from fastapi import HTTPException
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import IntegrityError, OperationalError

import app.models  # noqa: F401
from app.models.enums import EnrollmentStatus
from app.services import certificate_service


class TestGenerateCertificateNumber:
    """Tests for generate_certificate_number."""

    def test_format(self):
        user_id = uuid.UUID("12345678-1234-5678-1234-567812abcdef")

        number = certificate_service.generate_certificate_number(user_id, now_ms=1700000000000)

        assert number == "CERT-1700000000000-abcdef"

    def test_uses_current_time(self, student):
        number = certificate_service.generate_certificate_number(student.id)

        prefix, millis, suffix = number.split("-")
        assert prefix == "CERT"
        assert len(millis) >= 13
        assert suffix == str(student.id)[-6:]


class TestInsertCertificate:
    """Tests for the atomic insert."""

    @pytest.mark.asyncio
    async def test_statement_ignores_duplicates(
        self, mock_async_session, make_enrollment, db_result
    ):
        new_id = uuid.uuid4()
        mock_async_session.execute.return_value = db_result(scalar=new_id)

        result = await certificate_service.insert_certificate(
            make_enrollment(status=EnrollmentStatus.COMPLETED), mock_async_session
        )

        assert result == new_id
        stmt = mock_async_session.execute.call_args.args[0]
        sql = str(stmt.compile(dialect=postgresql.dialect()))
        assert "ON CONFLICT (user_id, course_id) DO NOTHING" in sql
        assert "RETURNING certificates.id" in sql


class TestInsertWithRetry:
    """Tests for the certificate number clash retry."""

    @pytest.mark.asyncio
    async def test_number_clash_is_retried_with_fresh_number(
        self, mock_async_session, make_enrollment
    ):
        certificate_id = uuid.uuid4()
        clash = IntegrityError("INSERT", {}, Exception("certificates_certificate_number_key"))
        insert = AsyncMock(side_effect=[clash, certificate_id])

        with patch.object(certificate_service, "insert_certificate", insert):
            result = await certificate_service.insert_certificate_with_retry(
                make_enrollment(status=EnrollmentStatus.COMPLETED), mock_async_session
            )

        assert result == certificate_id
        assert insert.await_count == 2
        first, second = (call.kwargs["certificate_number"] for call in insert.await_args_list)
        assert first != second
        assert mock_async_session.begin_nested.call_count == 2

    @pytest.mark.asyncio
    async def test_repeated_clash_is_raised(self, mock_async_session, make_enrollment):
        clash = IntegrityError("INSERT", {}, Exception("certificates_certificate_number_key"))

        with patch.object(
            certificate_service, "insert_certificate", AsyncMock(side_effect=[clash, clash])
        ):
            with pytest.raises(IntegrityError):
                await certificate_service.insert_certificate_with_retry(
                    make_enrollment(status=EnrollmentStatus.COMPLETED), mock_async_session
                )


class TestIssueCertificate:
    """Tests for issue_certificate."""

    @pytest.mark.asyncio
    async def test_new_certificate_notifies_once(self, mock_async_session, make_enrollment):
        enrollment = make_enrollment(status=EnrollmentStatus.COMPLETED, progress=100)
        certificate_id = uuid.uuid4()

        with patch.object(
            certificate_service, "insert_certificate", AsyncMock(return_value=certificate_id)
        ), patch(
            "app.services.notification_service.notify_certificate_issued",
            new_callable=AsyncMock,
        ) as notify:
            result = await certificate_service.issue_certificate(enrollment, mock_async_session)

        assert result == certificate_id
        mock_async_session.begin_nested.assert_called_once()
        notify.assert_awaited_once_with(enrollment, certificate_id, mock_async_session)

    @pytest.mark.asyncio
    async def test_existing_certificate_is_not_duplicated(
        self, mock_async_session, make_enrollment
    ):
        enrollment = make_enrollment(status=EnrollmentStatus.COMPLETED, progress=100)

        with patch.object(
            certificate_service, "insert_certificate", AsyncMock(return_value=None)
        ), patch(
            "app.services.notification_service.notify_certificate_issued",
            new_callable=AsyncMock,
        ) as notify:
            result = await certificate_service.issue_certificate(enrollment, mock_async_session)

        assert result is None
        notify.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_database_error_is_logged_not_raised(
        self, mock_async_session, make_enrollment, caplog
    ):
        enrollment = make_enrollment(status=EnrollmentStatus.COMPLETED, progress=100)
        error = OperationalError("INSERT", {}, Exception("connection lost"))

        with patch.object(
            certificate_service, "insert_certificate", AsyncMock(side_effect=error)
        ), patch(
            "app.services.notification_service.notify_certificate_issued",
            new_callable=AsyncMock,
        ) as notify:
            result = await certificate_service.issue_certificate(enrollment, mock_async_session)

        assert result is None
        notify.assert_not_awaited()
        assert "Certificate issuance failed" in caplog.text


class TestClaimCertificate:
    """Tests for claim_certificate."""

    @pytest.mark.asyncio
    async def test_missing_enrollment(self, mock_async_session, student):
        with pytest.raises(HTTPException) as exc_info:
            await certificate_service.claim_certificate(student, 5, mock_async_session)

        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_other_users_enrollment_is_forbidden(
        self, mock_async_session, student, make_enrollment
    ):
        mock_async_session.get.return_value = make_enrollment(
            status=EnrollmentStatus.COMPLETED, user_id=uuid.uuid4()
        )

        with pytest.raises(HTTPException) as exc_info:
            await certificate_service.claim_certificate(student, 1, mock_async_session)

        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    async def test_incomplete_course(self, mock_async_session, student, make_enrollment):
        mock_async_session.get.return_value = make_enrollment(progress=75)

        with pytest.raises(HTTPException) as exc_info:
            await certificate_service.claim_certificate(student, 1, mock_async_session)

        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "Course not completed yet"

    @pytest.mark.asyncio
    async def test_returns_existing_certificate_without_notifying(
        self, mock_async_session, student, make_enrollment, db_result
    ):
        mock_async_session.get.return_value = make_enrollment(
            status=EnrollmentStatus.COMPLETED, progress=100
        )
        existing = SimpleNamespace(id=uuid.uuid4(), certificate_number="CERT-1-12ab34")
        mock_async_session.execute.return_value = db_result(scalar=existing)

        with patch.object(
            certificate_service, "insert_certificate", AsyncMock(return_value=None)
        ), patch(
            "app.services.notification_service.notify_certificate_issued",
            new_callable=AsyncMock,
        ) as notify:
            certificate = await certificate_service.claim_certificate(
                student, 1, mock_async_session
            )

        assert certificate is existing
        notify.assert_not_awaited()
        mock_async_session.commit.assert_awaited_once()


class TestBuildPdfs:
    """Tests for the PDF entry points."""

    @pytest.mark.asyncio
    async def test_preview_requires_fields(self, mock_async_session):
        with pytest.raises(HTTPException) as exc_info:
            await certificate_service.build_preview_pdf(
                "Siti Rahma", None, "CERT-1", None, None, mock_async_session
            )

        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == "Missing required fields"

    @pytest.mark.asyncio
    async def test_preview_renders_pdf(self, mock_async_session):
        with patch.object(
            certificate_service,
            "get_certificate_branding",
            AsyncMock(return_value={"theme_color": "#123456", "logo_url": None}),
        ):
            pdf = await certificate_service.build_preview_pdf(
                "Siti Rahma", "Python Basics", "CERT-1", None, "6 weeks", mock_async_session
            )

        assert pdf.startswith(b"%PDF")

    @pytest.mark.asyncio
    async def test_other_users_certificate_is_forbidden(self, mock_async_session, student):
        certificate = SimpleNamespace(user_id=uuid.uuid4())

        with patch.object(
            certificate_service, "get_certificate", AsyncMock(return_value=certificate)
        ):
            with pytest.raises(HTTPException) as exc_info:
                await certificate_service.build_certificate_pdf(
                    uuid.uuid4(), student, mock_async_session
                )

        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    async def test_branding_falls_back_on_database_error(self, mock_async_session):
        error = OperationalError("SELECT", {}, Exception("down"))

        with patch(
            "app.services.settings_service.get_all_settings", AsyncMock(side_effect=error)
        ):
            branding = await certificate_service.get_certificate_branding(mock_async_session)

        assert branding == {"theme_color": "#2563eb", "logo_url": None}


class TestClaimRetry:
    @pytest.mark.asyncio
    async def test_claim_survives_certificate_number_clash(
        self, mock_async_session, student, make_enrollment, db_result
    ):
        enrollment = make_enrollment(status=EnrollmentStatus.COMPLETED, progress=100)
        mock_async_session.get.return_value = enrollment
        issued = SimpleNamespace(id=uuid.uuid4(), certificate_number="CERT-2-12ab34")
        mock_async_session.execute.return_value = db_result(scalar=issued)
        clash = IntegrityError("INSERT", {}, Exception("certificates_certificate_number_key"))

        with patch.object(
            certificate_service, "insert_certificate", AsyncMock(side_effect=[clash, issued.id])
        ), patch(
            "app.services.notification_service.notify_certificate_issued",
            new_callable=AsyncMock,
        ) as notify:
            certificate = await certificate_service.claim_certificate(
                student, 1, mock_async_session
            )

        assert certificate is issued
        notify.assert_awaited_once_with(enrollment, issued.id, mock_async_session)
        mock_async_session.commit.assert_awaited_once()
