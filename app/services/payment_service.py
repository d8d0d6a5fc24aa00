"""
Payment Service

Manual payment submission and admin verification.

Verifying a payment is what grants access to a course: it activates (or
creates) the matching enrollment in the same transaction.
"""

import logging
import secrets
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.course import Course
from app.models.enrollment import Enrollment
from app.models.enums import EnrollmentStatus, NotificationType, PaymentStatus
from app.models.payment import Payment
from app.models.user import User
from app.schemas.payment import PaymentCreate
from app.services import enrollment_service, notification_service


logger = logging.getLogger(__name__)


def generate_invoice_number(now: Optional[datetime] = None) -> str:
    """e.g. ``INV-20250305-4F9A1C``."""
    now = now or datetime.now(timezone.utc)
    return f"INV-{now:%Y%m%d}-{secrets.token_hex(3).upper()}"


async def get_payment(payment_id: int, db: AsyncSession) -> Payment:
    """
    Raises:
        HTTPException: 404 if the payment does not exist.
    """
    payment = await db.get(Payment, payment_id)

    if not payment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Payment not found",
        )

    return payment


async def create_payment(
    user: User,
    data: PaymentCreate,
    db: AsyncSession,
) -> Payment:
    """
    Submit a payment for a course.

    Args:
        user: Paying student.
        data: Payment details.
        db: Database session.

    Returns:
        The PENDING payment.

    Raises:
        HTTPException: 404 if the course is missing, 409 if the user already
            has access or the invoice number is taken.
    """
    course = await db.get(Course, data.course_id)

    if not course:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Course not found",
        )

    result = await db.execute(
        select(Enrollment.status).where(
            Enrollment.user_id == user.id,
            Enrollment.course_id == data.course_id,
        )
    )
    enrollment_status = result.scalar_one_or_none()
    if enrollment_status in (EnrollmentStatus.ACTIVE, EnrollmentStatus.COMPLETED):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Already enrolled in this course",
        )

    invoice_number = data.invoice_number or generate_invoice_number()
    result = await db.execute(
        select(Payment.id).where(Payment.invoice_number == invoice_number)
    )
    if result.scalar_one_or_none() is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Invoice number already exists",
        )

    payment = Payment(
        user_id=user.id,
        course_id=data.course_id,
        amount=data.amount,
        status=PaymentStatus.PENDING,
        payment_method=data.payment_method,
        invoice_number=invoice_number,
        proof_url=data.proof_url,
    )
    db.add(payment)
    await db.flush()

    # Admin feed
    await notification_service.create_notification(
        db,
        type=NotificationType.PAYMENT,
        title="New payment submitted",
        message=f'{user.full_name} submitted a payment for "{course.title}".',
        icon="credit-card",
        color="#f59e0b",
        related_id=str(payment.id),
        details={"action": "create", "entity": "payment"},
        link="/admin/payments",
    )

    await db.commit()
    await db.refresh(payment)

    logger.info("Payment %s (%s) submitted by user %s", payment.id, invoice_number, user.id)
    return payment


async def get_user_payments(user: User, db: AsyncSession) -> List[Payment]:
    result = await db.execute(
        select(Payment)
        .where(Payment.user_id == user.id)
        .order_by(Payment.created_at.desc())
    )
    return list(result.scalars().all())


async def get_all_payments(
    db: AsyncSession,
    payment_status: Optional[PaymentStatus] = None,
) -> List[Payment]:
    """All payments, optionally filtered by status (admin view)."""
    query = select(Payment).order_by(Payment.created_at.desc())
    if payment_status is not None:
        query = query.where(Payment.status == payment_status)

    result = await db.execute(query)
    return list(result.scalars().all())


async def verify_payment(payment_id: int, db: AsyncSession) -> Payment:
    """
    Mark a pending payment as verified and grant course access.

    Flow:
    1. Get or create the (user, course) enrollment and set it ACTIVE.
    2. Link the enrollment and stamp ``verified_at``.
    3. Count the student on the course when the enrollment becomes ACTIVE.
    4. Notify the student.

    Everything is committed together.

    Raises:
        HTTPException: 404 if missing, 400 if the payment is not pending.
    """
    payment = await get_payment(payment_id, db)

    if payment.status != PaymentStatus.PENDING:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Payment is already {payment.status.value.lower()}",
        )

    enrollment, created = await enrollment_service.get_or_create_enrollment(
        payment.user_id, payment.course_id, db
    )
    activated = created or enrollment.status == EnrollmentStatus.PENDING
    if enrollment.status == EnrollmentStatus.PENDING:
        enrollment.status = EnrollmentStatus.ACTIVE

    course = await db.get(Course, payment.course_id)
    if activated and course:
        course.total_students += 1

    payment.status = PaymentStatus.VERIFIED
    payment.enrollment_id = enrollment.id
    payment.verified_at = datetime.now(timezone.utc)

    course_title = course.title if course else "your course"
    await notification_service.create_notification(
        db,
        type=NotificationType.PAYMENT,
        user_id=payment.user_id,
        title="Payment verified",
        message=f'Your payment for "{course_title}" has been verified. You can start learning now.',
        icon="check-circle",
        color="#16a34a",
        related_id=str(payment.id),
        details={
            "action": "update",
            "entity": "payment",
            "old_value": PaymentStatus.PENDING.value,
            "new_value": PaymentStatus.VERIFIED.value,
        },
        link="/student/my-courses",
    )

    await db.commit()
    await db.refresh(payment)

    logger.info("Payment %s verified, enrollment %s active", payment.id, enrollment.id)
    return payment


async def reject_payment(payment_id: int, db: AsyncSession) -> Payment:
    """
    Reject a payment.

    Raises:
        HTTPException: 404 if missing, 400 if it was already verified.
    """
    payment = await get_payment(payment_id, db)

    if payment.status == PaymentStatus.VERIFIED:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Verified payments cannot be rejected",
        )

    old_status = payment.status
    payment.status = PaymentStatus.REJECTED

    course = await db.get(Course, payment.course_id)
    course_title = course.title if course else "your course"
    await notification_service.create_notification(
        db,
        type=NotificationType.PAYMENT,
        user_id=payment.user_id,
        title="Payment rejected",
        message=f'Your payment for "{course_title}" was rejected. Please contact support.',
        icon="x-circle",
        color="#dc2626",
        related_id=str(payment.id),
        details={
            "action": "update",
            "entity": "payment",
            "old_value": old_status.value,
            "new_value": PaymentStatus.REJECTED.value,
        },
        link="/student/payments",
    )

    await db.commit()
    await db.refresh(payment)

    logger.info("Payment %s rejected", payment.id)
    return payment
