"""
API Router

Aggregates all endpoint routers. Mounted under ``/api``.
"""

from fastapi import APIRouter

from app.api.v1.endpoints import (
    analytics,
    auth,
    cart,
    certificates,
    courses,
    enrollments,
    notifications,
    payments,
    progress,
    reviews,
    settings,
    users,
)

router = APIRouter()

# Include authentication routes
router.include_router(auth.router)

# Include user routes
router.include_router(users.router)

# Include course and lesson routes
router.include_router(courses.router)
router.include_router(courses.lessons_router)

# Include analytics routes
router.include_router(analytics.router)

# Include enrollment and progress routes
router.include_router(enrollments.router)
router.include_router(progress.router)

# Include payment routes
router.include_router(payments.router)

# Include certificate routes
router.include_router(certificates.router)

# Include review, notification, settings and cart routes
router.include_router(reviews.router)
router.include_router(notifications.router)
router.include_router(settings.router)
router.include_router(cart.router)
