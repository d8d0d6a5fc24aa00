"""
Database Enums

Python Enums that map to PostgreSQL ENUM types.
"""

import enum


class UserRole(str, enum.Enum):
    """User role enumeration."""
    STUDENT = "STUDENT"
    INSTRUCTOR = "INSTRUCTOR"
    ADMIN = "ADMIN"


class CourseLevel(str, enum.Enum):
    """Course difficulty level."""
    BEGINNER = "BEGINNER"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"


class CourseStatus(str, enum.Enum):
    """Course publication status."""
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"


class EnrollmentStatus(str, enum.Enum):
    """Enrollment lifecycle status."""
    PENDING = "PENDING"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"


class PaymentStatus(str, enum.Enum):
    """Payment review status."""
    PENDING = "PENDING"
    VERIFIED = "VERIFIED"
    REJECTED = "REJECTED"


class NotificationType(str, enum.Enum):
    """Notification category."""
    SYSTEM = "SYSTEM"
    USER = "USER"
    COURSE = "COURSE"
    PAYMENT = "PAYMENT"
    CERTIFICATE = "CERTIFICATE"
    ENROLLMENT = "ENROLLMENT"


class NotificationPreference(str, enum.Enum):
    """User-controlled notification channels (keys of User.notification_preferences)."""
    COURSE_UPDATES = "course_updates"
    NEW_LESSONS = "new_lessons"
    PROMOTIONS = "promotions"
