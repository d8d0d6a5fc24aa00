"""
Notification Service

Creation, listing and housekeeping of in-app notifications.
"""

import logging
import uuid
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status
from sqlalchemy import delete, func, select, true, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.course import Course
from app.models.enrollment import Enrollment
from app.models.enums import NotificationType, UserRole
from app.models.notification import Notification
from app.models.user import User


logger = logging.getLogger(__name__)


def _visible_to(user: User):
    """Admins see every notification, everyone else only their own."""
    if user.role == UserRole.ADMIN:
        return true()
    return Notification.user_id == user.id


async def create_notification(
    db: AsyncSession,
    *,
    type: NotificationType,
    title: str,
    message: str,
    user_id: Optional[uuid.UUID] = None,
    icon: str = "bell",
    color: str = "#4c9aff",
    related_id: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
    link: Optional[str] = None,
) -> Notification:
    """
    Add a notification to the current transaction.

    The caller owns the commit.
    """
    notification = Notification(
        user_id=user_id,
        type=type,
        title=title,
        message=message,
        icon=icon,
        color=color,
        related_id=related_id,
        details=details,
        link=link,
        is_read=False,
    )
    db.add(notification)
    await db.flush()
    return notification


async def notify_certificate_issued(
    enrollment: Enrollment,
    certificate_id: uuid.UUID,
    db: AsyncSession,
) -> Optional[Notification]:
    """
    Tell a student their certificate is ready.

    Best effort: runs in a SAVEPOINT and a failure is logged, never raised,
    so it cannot undo the certificate or the enrollment update.
    """
    try:
        async with db.begin_nested():
            course = await db.get(Course, enrollment.course_id)
            course_title = course.title if course else "your course"
            return await create_notification(
                db,
                type=NotificationType.CERTIFICATE,
                user_id=enrollment.user_id,
                title="Certificate available",
                message=(
                    f'Congratulations! You have completed "{course_title}". '
                    "Your certificate is ready to download."
                ),
                icon="award",
                color="#16a34a",
                related_id=str(certificate_id),
                details={"action": "create", "entity": "certificate"},
                link="/student/certificates",
            )
    except SQLAlchemyError:
        logger.exception(
            "Failed to send certificate notification for enrollment %s",
            enrollment.id,
        )
        return None


async def list_notifications(
    user: User,
    db: AsyncSession,
    limit: int = 50,
    offset: int = 0,
) -> List[Notification]:
    """Newest first."""
    result = await db.execute(
        select(Notification)
        .where(_visible_to(user))
        .order_by(Notification.created_at.desc(), Notification.id.desc())
        .offset(offset)
        .limit(limit)
    )
    return list(result.scalars().all())


async def get_unread_count(user: User, db: AsyncSession) -> int:
    result = await db.execute(
        select(func.count(Notification.id)).where(
            _visible_to(user),
            Notification.is_read.is_(False),
        )
    )
    return result.scalar_one()


async def get_notification(
    notification_id: int,
    user: User,
    db: AsyncSession,
) -> Notification:
    """
    Raises:
        HTTPException: 404 if missing or not visible to the user.
    """
    result = await db.execute(
        select(Notification).where(
            Notification.id == notification_id,
            _visible_to(user),
        )
    )
    notification = result.scalar_one_or_none()

    if not notification:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Notification not found",
        )

    return notification


async def mark_as_read(
    notification_id: int,
    user: User,
    db: AsyncSession,
) -> Notification:
    notification = await get_notification(notification_id, user, db)
    notification.is_read = True
    await db.commit()
    await db.refresh(notification)
    return notification


async def mark_all_as_read(user: User, db: AsyncSession) -> int:
    """Returns the number of notifications that were unread."""
    result = await db.execute(
        update(Notification)
        .where(_visible_to(user), Notification.is_read.is_(False))
        .values(is_read=True)
    )
    await db.commit()
    return result.rowcount or 0


async def delete_notification(
    notification_id: int,
    user: User,
    db: AsyncSession,
) -> None:
    notification = await get_notification(notification_id, user, db)
    await db.delete(notification)
    await db.commit()


async def clear_all(db: AsyncSession) -> int:
    """Delete every notification. Admin only."""
    result = await db.execute(delete(Notification))
    await db.commit()
    return result.rowcount or 0


async def broadcast(
    db: AsyncSession,
    *,
    preference: str,
    type: NotificationType,
    title: str,
    message: str,
    icon: str = "bell",
    color: str = "#4c9aff",
    related_id: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
) -> int:
    """
    Create one notification per user who has ``preference`` enabled.

    Users without a stored preference are treated as opted in. The caller
    owns the commit.

    Returns:
        Number of notifications created.
    """
    result = await db.execute(select(User))
    recipients = [user for user in result.scalars().all() if user.wants_notification(preference)]

    for user in recipients:
        db.add(
            Notification(
                user_id=user.id,
                type=type,
                title=title,
                message=message,
                icon=icon,
                color=color,
                related_id=related_id,
                details=details,
                is_read=False,
            )
        )

    await db.flush()
    logger.info("Broadcast '%s' to %d users (preference=%s)", title, len(recipients), preference)
    return len(recipients)
