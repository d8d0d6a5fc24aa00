"""
Course Model

Catalog entry: pricing, level, publication status and owning instructor.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, Enum, Float, ForeignKey, Integer, Numeric, String, Text, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base
from app.models.enums import CourseLevel, CourseStatus

if TYPE_CHECKING:
    from app.models.user import User
    from app.models.lesson import Lesson
    from app.models.enrollment import Enrollment
    from app.models.certificate import Certificate


class Course(Base):
    """
    Course model.

    Attributes:
        id: Integer primary key.
        title: Course title.
        description: Long description.
        category: Free-form category used for filtering.
        level: BEGINNER, INTERMEDIATE or ADVANCED.
        price: Price in the platform currency.
        instructor_id: Owning instructor account (nullable).
        instructor_name: Name printed on certificates.
        duration: Human readable duration, e.g. "6 weeks".
        total_students: Count of verified enrollments.
        rating: Average review rating, one decimal.
        status: DRAFT, PUBLISHED or ARCHIVED.
    """

    __tablename__ = "courses"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )
    title: Mapped[str] = mapped_column(
        String(500),
        nullable=False,
    )
    description: Mapped[str] = mapped_column(
        Text,
        default="",
        nullable=False,
    )
    category: Mapped[str] = mapped_column(
        String(100),
        index=True,
        nullable=False,
    )
    level: Mapped[CourseLevel] = mapped_column(
        Enum(CourseLevel, name="course_level", create_constraint=True),
        default=CourseLevel.BEGINNER,
        index=True,
        nullable=False,
    )
    price: Mapped[Decimal] = mapped_column(
        Numeric(12, 2),
        default=0,
        nullable=False,
    )
    thumbnail_url: Mapped[Optional[str]] = mapped_column(
        String(512),
        nullable=True,
    )
    instructor_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    instructor_name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    duration: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
    )
    total_students: Mapped[int] = mapped_column(
        Integer,
        default=0,
        nullable=False,
    )
    rating: Mapped[float] = mapped_column(
        Float,
        default=0.0,
        nullable=False,
    )
    status: Mapped[CourseStatus] = mapped_column(
        Enum(CourseStatus, name="course_status", create_constraint=True),
        default=CourseStatus.DRAFT,
        index=True,
        nullable=False,
    )
    certificate_template: Mapped[Optional[str]] = mapped_column(
        String(512),
        nullable=True,
    )
    preview_video_url: Mapped[Optional[str]] = mapped_column(
        String(512),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    # Relationships
    instructor: Mapped[Optional["User"]] = relationship(
        "User",
        foreign_keys=[instructor_id],
    )
    lessons: Mapped[list["Lesson"]] = relationship(
        "Lesson",
        back_populates="course",
        order_by="Lesson.position",
        cascade="all, delete-orphan",
    )
    enrollments: Mapped[list["Enrollment"]] = relationship(
        "Enrollment",
        back_populates="course",
        cascade="all, delete-orphan",
    )
    certificates: Mapped[list["Certificate"]] = relationship(
        "Certificate",
        back_populates="course",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Course(id={self.id}, title={self.title[:30]}...)>"
