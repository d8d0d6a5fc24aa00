"""
EduLearn Backend - Services Module

Business logic layer.
"""

from app.services import notification_service
from app.services import settings_service
from app.services import certificate_service
from app.services import progress_service
from app.services import enrollment_service
from app.services import payment_service
from app.services import course_service
from app.services import review_service
from app.services import cart_service
from app.services import analytics_service

__all__ = [
    "notification_service",
    "settings_service",
    "certificate_service",
    "progress_service",
    "enrollment_service",
    "payment_service",
    "course_service",
    "review_service",
    "cart_service",
    "analytics_service",
]
