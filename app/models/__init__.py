"""
EduLearn Backend - Models Module

This module exports all SQLAlchemy models for the application.
Import Base for Alembic migrations.
"""

from app.core.database import Base

# Enums
from app.models.enums import (
    UserRole,
    CourseLevel,
    CourseStatus,
    EnrollmentStatus,
    PaymentStatus,
    NotificationType,
    NotificationPreference,
)

# Models
from app.models.user import User
from app.models.course import Course
from app.models.lesson import Lesson
from app.models.enrollment import Enrollment
from app.models.lesson_progress import LessonProgress
from app.models.payment import Payment
from app.models.certificate import Certificate
from app.models.review import Review
from app.models.notification import Notification
from app.models.setting import Setting
from app.models.cart_item import CartItem

__all__ = [
    # Base
    "Base",
    # Enums
    "UserRole",
    "CourseLevel",
    "CourseStatus",
    "EnrollmentStatus",
    "PaymentStatus",
    "NotificationType",
    "NotificationPreference",
    # Models
    "User",
    "Course",
    "Lesson",
    "Enrollment",
    "LessonProgress",
    "Payment",
    "Certificate",
    "Review",
    "Notification",
    "Setting",
    "CartItem",
]
