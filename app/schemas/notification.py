"""
Notification Schemas

Pydantic models for in-app notifications.
"""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from app.models.enums import NotificationPreference, NotificationType


class NotificationDetails(BaseModel):
    """Structured context attached to a notification."""

    action: str
    entity: str
    old_value: Optional[str] = None
    new_value: Optional[str] = None


class NotificationResponse(BaseModel):
    """Schema for notification response."""

    id: int
    user_id: Optional[uuid.UUID] = None
    type: NotificationType
    title: str
    message: str
    icon: str
    color: str
    related_id: Optional[str] = None
    details: Optional[NotificationDetails] = None
    link: Optional[str] = None
    is_read: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class NotificationBroadcast(BaseModel):
    """Admin broadcast to every user who opted in to ``preference``."""

    title: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1)
    type: NotificationType = NotificationType.SYSTEM
    icon: str = "bell"
    color: str = "#4c9aff"
    preference: NotificationPreference
    related_id: Optional[str] = None
    details: Optional[NotificationDetails] = None


class BroadcastResult(BaseModel):
    """Number of notifications created by a broadcast."""

    sent: int
