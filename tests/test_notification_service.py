"""
Notification Service Unit Tests
"""

import uuid
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.exc import OperationalError

import app.models  # noqa: F401
from app.models.enums import NotificationPreference, NotificationType
from app.models.notification import Notification
from app.models.user import User
from app.services import notification_service


class TestCertificateNotification:
    @pytest.mark.asyncio
    async def test_creates_certificate_notification(self, mock_async_session, make_enrollment):
        mock_async_session.get.return_value = SimpleNamespace(title="Python for Data Analysis")
        enrollment = make_enrollment()
        certificate_id = uuid.uuid4()

        notification = await notification_service.notify_certificate_issued(
            enrollment, certificate_id, mock_async_session
        )

        assert isinstance(notification, Notification)
        assert notification.type == NotificationType.CERTIFICATE
        assert notification.user_id == enrollment.user_id
        assert notification.related_id == str(certificate_id)
        assert "Python for Data Analysis" in notification.message

    @pytest.mark.asyncio
    async def test_failure_is_swallowed(self, mock_async_session, make_enrollment, caplog):
        error = OperationalError("INSERT", {}, Exception("down"))

        with patch.object(notification_service, "create_notification", AsyncMock(side_effect=error)):
            result = await notification_service.notify_certificate_issued(
                make_enrollment(), uuid.uuid4(), mock_async_session
            )

        assert result is None
        assert "Failed to send certificate notification" in caplog.text


class TestBroadcast:
    @pytest.mark.asyncio
    async def test_respects_preferences(self, mock_async_session, db_result):
        users = [
            User(id=uuid.uuid4(), notification_preferences=None),
            User(id=uuid.uuid4(), notification_preferences={"new_lessons": False}),
            User(id=uuid.uuid4(), notification_preferences={"new_lessons": True}),
        ]
        mock_async_session.execute.return_value = db_result(scalars=users)

        count = await notification_service.broadcast(
            mock_async_session,
            preference=NotificationPreference.NEW_LESSONS.value,
            type=NotificationType.COURSE,
            title="New course",
            message="A new course is available",
        )

        assert count == 2
        added = [call.args[0] for call in mock_async_session.add.call_args_list]
        assert [n.user_id for n in added] == [users[0].id, users[2].id]
        mock_async_session.commit.assert_not_awaited()
