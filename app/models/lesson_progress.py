"""
Lesson Progress Model

Per-lesson completion record within an enrollment.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base

if TYPE_CHECKING:
    from app.models.enrollment import Enrollment
    from app.models.lesson import Lesson


class LessonProgress(Base):
    """
    Lesson progress model.

    One row per (user, lesson); linked to the enrollment it counts towards.

    Attributes:
        id: Integer primary key.
        user_id: Foreign key to users table.
        lesson_id: Foreign key to lessons table.
        enrollment_id: Foreign key to enrollments table.
        completed: Whether the lesson is finished.
        completed_at: When it was (last) marked complete.
        watch_time_seconds: Optional reported watch time.
    """

    __tablename__ = "lesson_progress"

    __table_args__ = (
        UniqueConstraint("user_id", "lesson_id", name="uq_lesson_progress_user_lesson"),
    )

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    lesson_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("lessons.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    enrollment_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("enrollments.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    completed: Mapped[bool] = mapped_column(
        Boolean,
        default=False,
        nullable=False,
    )
    completed_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    watch_time_seconds: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
    )

    # Relationships
    enrollment: Mapped["Enrollment"] = relationship(
        "Enrollment",
        back_populates="lesson_progress",
    )
    lesson: Mapped["Lesson"] = relationship(
        "Lesson",
        back_populates="progress_records",
    )

    def __repr__(self) -> str:
        return f"<LessonProgress(id={self.id}, lesson_id={self.lesson_id}, completed={self.completed})>"
