"""
EduLearn Backend - Schemas Module

Pydantic models for request/response validation.
"""

from app.schemas.user import UserCreate, UserResponse, UserUpdate, UserLogin
from app.schemas.token import Token, TokenPayload, LoginResponse
from app.schemas.course import (
    LessonCreate,
    LessonResponse,
    CourseCreate,
    CourseUpdate,
    CourseResponse,
    CourseDetailResponse,
    CourseListResponse,
)
from app.schemas.progress import (
    EnrollmentResponse,
    LessonProgressResponse,
    CourseCompletionSummary,
)
from app.schemas.certificate import CertificateResponse, CertificateBranding

__all__ = [
    # User
    "UserCreate",
    "UserResponse",
    "UserUpdate",
    "UserLogin",
    # Token
    "Token",
    "TokenPayload",
    "LoginResponse",
    # Course
    "LessonCreate",
    "LessonResponse",
    "CourseCreate",
    "CourseUpdate",
    "CourseResponse",
    "CourseDetailResponse",
    "CourseListResponse",
    # Progress
    "EnrollmentResponse",
    "LessonProgressResponse",
    "CourseCompletionSummary",
    # Certificate
    "CertificateResponse",
    "CertificateBranding",
]
