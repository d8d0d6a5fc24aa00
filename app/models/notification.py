"""
Notification Model

In-app alerts. A NULL user_id marks a platform-wide (admin feed) notification.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base
from app.models.enums import NotificationType


class Notification(Base):
    """
    Notification model.

    Attributes:
        user_id: Recipient, or None for platform-wide entries.
        type: Notification category.
        icon: Icon hint for clients.
        color: Colour hint for clients.
        related_id: Identifier of the entity the notification is about.
        details: {action, entity, old_value, new_value} (column "metadata").
        link: Client route to open when the notification is clicked.
    """

    __tablename__ = "notifications"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    user_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=True,
    )
    type: Mapped[NotificationType] = mapped_column(
        Enum(NotificationType, name="notification_type", create_constraint=True),
        index=True,
        nullable=False,
    )
    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    message: Mapped[str] = mapped_column(
        Text,
        nullable=False,
    )
    icon: Mapped[str] = mapped_column(
        String(50),
        default="bell",
        nullable=False,
    )
    color: Mapped[str] = mapped_column(
        String(20),
        default="#4c9aff",
        nullable=False,
    )
    related_id: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
    )
    # "metadata" is reserved on declarative classes
    details: Mapped[Optional[Dict[str, Any]]] = mapped_column(
        "metadata",
        JSONB,
        nullable=True,
    )
    link: Mapped[Optional[str]] = mapped_column(
        String(255),
        nullable=True,
    )
    is_read: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        index=True,
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        index=True,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Notification(id={self.id}, type={self.type}, user_id={self.user_id})>"
