"""
Notification Routes

In-app notification feed.
"""

from typing import Annotated, List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, require_admin
from app.core.database import get_db
from app.models.user import User
from app.schemas.notification import (
    BroadcastResult,
    NotificationBroadcast,
    NotificationResponse,
)
from app.services import notification_service


router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get(
    "",
    response_model=List[NotificationResponse],
    summary="List my notifications",
)
async def list_notifications(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    """Newest first. Admins also see platform-wide entries."""
    return await notification_service.list_notifications(current_user, db, limit, offset)


@router.get(
    "/recent",
    response_model=List[NotificationResponse],
    summary="Most recent notifications",
)
async def recent_notifications(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    limit: int = Query(5, ge=1, le=50),
):
    return await notification_service.list_notifications(current_user, db, limit)


@router.get(
    "/unread-count",
    summary="Number of unread notifications",
)
async def unread_count(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    return {"count": await notification_service.get_unread_count(current_user, db)}


@router.post(
    "/read-all",
    summary="Mark all notifications as read",
)
async def mark_all_read(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    return {"updated": await notification_service.mark_all_as_read(current_user, db)}


@router.post(
    "/broadcast",
    response_model=BroadcastResult,
    summary="Send a notification to opted-in users (admin)",
)
async def broadcast(
    data: NotificationBroadcast,
    _: Annotated[User, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> BroadcastResult:
    sent = await notification_service.broadcast(
        db,
        preference=data.preference.value,
        type=data.type,
        title=data.title,
        message=data.message,
        icon=data.icon,
        color=data.color,
        related_id=data.related_id,
        details=data.details.model_dump() if data.details else None,
    )
    await db.commit()
    return BroadcastResult(sent=sent)


@router.delete(
    "",
    summary="Delete all notifications (admin)",
)
async def clear_notifications(
    _: Annotated[User, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    return {"deleted": await notification_service.clear_all(db)}


@router.post(
    "/{notification_id}/read",
    response_model=NotificationResponse,
    summary="Mark a notification as read",
)
async def mark_read(
    notification_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    return await notification_service.mark_as_read(notification_id, current_user, db)


@router.delete(
    "/{notification_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a notification",
)
async def delete_notification(
    notification_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> None:
    await notification_service.delete_notification(notification_id, current_user, db)
