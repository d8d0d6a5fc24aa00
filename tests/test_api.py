"""
API Route Tests

Exercises routing, auth guards and response shaping with the database
and the current user replaced by fixtures.
"""

import uuid
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from app.api.deps import get_current_user
from app.core.database import get_db
from app.main import app as application


@pytest.fixture
def client(mock_async_session):
    async def override_get_db():
        yield mock_async_session

    application.dependency_overrides[get_db] = override_get_db
    yield TestClient(application)
    application.dependency_overrides.clear()


@pytest.fixture
def login_as(client):
    def _login(user):
        application.dependency_overrides[get_current_user] = lambda: user
        return client
    return _login


class TestPublicRoutes:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_login_with_unknown_email(self, client, mock_async_session, db_result):
        mock_async_session.execute.return_value = db_result(scalar=None)

        response = client.post(
            "/api/auth/login",
            json={"email": "nobody@edulearn.io", "password": "wrong-password"},
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid email or password"

    def test_form_token_with_unknown_email(self, client, mock_async_session, db_result):
        mock_async_session.execute.return_value = db_result(scalar=None)

        response = client.post(
            "/api/auth/token",
            data={"username": "nobody@edulearn.io", "password": "wrong-password"},
        )

        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid email or password"

    def test_register_rejects_overlong_password(self, client, mock_async_session):
        response = client.post(
            "/api/auth/register",
            json={
                "full_name": "Siti Rahma",
                "email": "siti@edulearn.io",
                "password": "p" * 80,
            },
        )

        assert response.status_code == 422
        mock_async_session.execute.assert_not_awaited()

    def test_protected_route_requires_token(self, client):
        response = client.get("/api/enrollments/me")

        assert response.status_code == 401


class TestRoleGuards:
    def test_student_cannot_list_all_enrollments(self, login_as, student):
        response = login_as(student).get("/api/enrollments")

        assert response.status_code == 403
        assert response.json()["detail"] == "Admin access required"

    def test_student_cannot_verify_payments(self, login_as, student):
        response = login_as(student).post("/api/payments/1/verify")

        assert response.status_code == 403

    def test_admin_recalculates_progress(self, login_as, admin):
        with patch(
            "app.services.progress_service.recalculate_enrollments",
            AsyncMock(return_value={"message": "Recalculated 1 enrollments", "updated_ids": [7]}),
        ) as recalculate:
            response = login_as(admin).post(
                "/api/enrollments/recalculate", json={"enrollment_id": 7}
            )

        assert response.status_code == 200
        assert response.json()["updated_ids"] == [7]
        assert recalculate.call_args.kwargs["enrollment_id"] == 7


class TestCertificateRoutes:
    def test_download_returns_pdf(self, login_as, student):
        certificate_id = uuid.uuid4()

        with patch(
            "app.services.certificate_service.build_certificate_pdf",
            AsyncMock(return_value=("CERT-1700000000000-12ab34", b"%PDF-1.4 test")),
        ):
            response = login_as(student).get(
                "/api/certificates/generate", params={"certificate_id": str(certificate_id)}
            )

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert (
            'filename="certificate-CERT-1700000000000-12ab34.pdf"'
            in response.headers["content-disposition"]
        )
        assert response.headers["cache-control"] == "no-cache, no-store, must-revalidate"
        assert response.content == b"%PDF-1.4 test"

    def test_preview_with_missing_fields(self, login_as, student):
        response = login_as(student).post(
            "/api/certificates/generate", json={"student_name": "Siti Rahma"}
        )

        assert response.status_code == 400
        assert response.json()["detail"] == "Missing required fields"
