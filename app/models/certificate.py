"""
Certificate Model

Course completion certificates, one per (user, course).
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.database import Base

if TYPE_CHECKING:
    from app.models.user import User
    from app.models.course import Course
    from app.models.enrollment import Enrollment


class Certificate(Base):
    """
    Certificate model for course completion.

    The (user_id, course_id) unique constraint is what guarantees a single
    certificate per course; issuance relies on it via ON CONFLICT DO NOTHING.

    Attributes:
        id: UUID primary key.
        user_id: Foreign key to users table.
        course_id: Foreign key to courses table.
        enrollment_id: Enrollment that earned the certificate.
        certificate_number: Public, human readable identifier.
        issued_at: Timestamp when certificate was issued.
        pdf_url: Optional pre-rendered PDF location (rendered on demand otherwise).
    """

    __tablename__ = "certificates"

    __table_args__ = (
        UniqueConstraint("user_id", "course_id", name="uq_certificate_user_course"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
        nullable=False,
    )
    course_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
    )
    enrollment_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("enrollments.id", ondelete="CASCADE"),
        nullable=False,
    )
    certificate_number: Mapped[str] = mapped_column(
        String(64),
        unique=True,
        index=True,
        nullable=False,
    )
    issued_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    pdf_url: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True,
    )

    # Relationships
    user: Mapped["User"] = relationship(
        "User",
        back_populates="certificates",
    )
    course: Mapped["Course"] = relationship(
        "Course",
        back_populates="certificates",
    )
    enrollment: Mapped["Enrollment"] = relationship("Enrollment")

    def __repr__(self) -> str:
        return f"<Certificate(id={self.id}, number={self.certificate_number})>"
