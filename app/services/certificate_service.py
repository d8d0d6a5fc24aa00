"""
Certificate Service

Issues completion certificates and renders them as PDFs.
"""

import logging
import time
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy import select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.config import settings
from app.models.certificate import Certificate
from app.models.enrollment import Enrollment
from app.models.enums import EnrollmentStatus, UserRole
from app.models.user import User
from app.services import notification_service, settings_service
from app.services.certificate_pdf import (
    CertificateData,
    format_completion_date,
    load_logo_data_url,
    render_certificate_pdf,
)


logger = logging.getLogger(__name__)


CERTIFICATE_NUMBER_ATTEMPTS = 2


def generate_certificate_number(user_id: uuid.UUID, now_ms: Optional[int] = None) -> str:
    """
    Build a certificate number: ``CERT-{epoch millis}-{last 6 chars of user id}``.

    Args:
        user_id: Owner of the certificate.
        now_ms: Timestamp override in milliseconds.
    """
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    return f"CERT-{now_ms}-{str(user_id)[-6:]}"


async def insert_certificate(
    enrollment: Enrollment,
    db: AsyncSession,
    certificate_number: Optional[str] = None,
) -> Optional[uuid.UUID]:
    """
    Atomically insert the certificate for an enrollment.

    Uses ``INSERT ... ON CONFLICT (user_id, course_id) DO NOTHING RETURNING id``
    so concurrent completions can never produce two certificates.

    Args:
        enrollment: Completed enrollment.
        db: Database session.
        certificate_number: Number to store; generated when omitted.

    Returns:
        The new certificate id, or None if one already existed.
    """
    stmt = (
        pg_insert(Certificate)
        .values(
            id=uuid.uuid4(),
            user_id=enrollment.user_id,
            course_id=enrollment.course_id,
            enrollment_id=enrollment.id,
            certificate_number=certificate_number or generate_certificate_number(enrollment.user_id),
        )
        .on_conflict_do_nothing(index_elements=["user_id", "course_id"])
        .returning(Certificate.id)
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def insert_certificate_with_retry(
    enrollment: Enrollment,
    db: AsyncSession,
) -> Optional[uuid.UUID]:
    """
    Run insert_certificate in a SAVEPOINT, retrying a certificate number clash.

    A duplicate ``certificate_number`` is outside the ON CONFLICT target and
    raises IntegrityError; the retry uses the next millisecond.

    Raises:
        IntegrityError: If every attempt clashed.
    """
    base_ms = int(time.time() * 1000)
    for attempt in range(CERTIFICATE_NUMBER_ATTEMPTS):
        number = generate_certificate_number(enrollment.user_id, now_ms=base_ms + attempt)
        try:
            async with db.begin_nested():
                return await insert_certificate(enrollment, db, certificate_number=number)
        except IntegrityError:
            if attempt + 1 >= CERTIFICATE_NUMBER_ATTEMPTS:
                raise
            logger.warning("Certificate number %s already taken, retrying", number)


async def issue_certificate(
    enrollment: Enrollment,
    db: AsyncSession,
) -> Optional[uuid.UUID]:
    """
    Issue the certificate for a freshly completed enrollment.

    Runs inside a SAVEPOINT. A database error is logged and rolled back to
    the savepoint so the caller's progress update still commits. The
    student is notified only when a certificate was actually created.

    Args:
        enrollment: Enrollment that just reached COMPLETED.
        db: Database session.

    Returns:
        Id of the new certificate, or None when nothing was inserted.
    """
    try:
        certificate_id = await insert_certificate_with_retry(enrollment, db)
    except SQLAlchemyError:
        logger.exception("Certificate issuance failed for enrollment %s", enrollment.id)
        return None

    if certificate_id is None:
        logger.info("Certificate already exists for enrollment %s", enrollment.id)
        return None

    logger.info("Issued certificate %s for enrollment %s", certificate_id, enrollment.id)
    await notification_service.notify_certificate_issued(enrollment, certificate_id, db)
    return certificate_id


async def _get_user_course_certificate(
    user_id: uuid.UUID,
    course_id: int,
    db: AsyncSession,
) -> Optional[Certificate]:
    result = await db.execute(
        select(Certificate)
        .options(selectinload(Certificate.course))
        .where(
            Certificate.user_id == user_id,
            Certificate.course_id == course_id,
        )
    )
    return result.scalar_one_or_none()


async def claim_certificate(
    user: User,
    enrollment_id: int,
    db: AsyncSession,
) -> Certificate:
    """
    Return the certificate of a completed enrollment, issuing it if needed.

    Args:
        user: Requesting user (owner or admin).
        enrollment_id: Completed enrollment.
        db: Database session.

    Returns:
        The (possibly pre-existing) certificate.

    Raises:
        HTTPException: 404 if the enrollment is missing, 403 if it belongs to
            someone else, 400 if the course is not completed yet.
    """
    enrollment = await db.get(Enrollment, enrollment_id)

    if not enrollment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Enrollment not found",
        )

    if enrollment.user_id != user.id and user.role != UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to claim this certificate",
        )

    if enrollment.status != EnrollmentStatus.COMPLETED:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Course not completed yet",
        )

    certificate_id = await insert_certificate_with_retry(enrollment, db)
    if certificate_id is not None:
        await notification_service.notify_certificate_issued(enrollment, certificate_id, db)
    await db.commit()

    certificate = await _get_user_course_certificate(enrollment.user_id, enrollment.course_id, db)
    if not certificate:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Certificate could not be issued",
        )

    return certificate


async def get_user_certificates(user: User, db: AsyncSession) -> List[Certificate]:
    """Certificates of a user, newest first, with their course."""
    result = await db.execute(
        select(Certificate)
        .options(selectinload(Certificate.course))
        .where(Certificate.user_id == user.id)
        .order_by(Certificate.issued_at.desc())
    )
    return list(result.scalars().all())


async def get_all_certificates(db: AsyncSession) -> List[Certificate]:
    result = await db.execute(
        select(Certificate)
        .options(selectinload(Certificate.course))
        .order_by(Certificate.issued_at.desc())
    )
    return list(result.scalars().all())


async def get_certificate(certificate_id: uuid.UUID, db: AsyncSession) -> Certificate:
    """
    Load a certificate with its user and course.

    Raises:
        HTTPException: 404 if not found.
    """
    result = await db.execute(
        select(Certificate)
        .options(selectinload(Certificate.user), selectinload(Certificate.course))
        .where(Certificate.id == certificate_id)
    )
    certificate = result.scalar_one_or_none()

    if not certificate:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Certificate not found",
        )

    return certificate


async def verify_certificate(certificate_number: str, db: AsyncSession) -> dict:
    """
    Public lookup of a certificate by its number.

    Raises:
        HTTPException: 404 if no certificate has that number.
    """
    result = await db.execute(
        select(Certificate)
        .options(selectinload(Certificate.user), selectinload(Certificate.course))
        .where(Certificate.certificate_number == certificate_number)
    )
    certificate = result.scalar_one_or_none()

    if not certificate:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Certificate not found",
        )

    return {
        "valid": True,
        "certificate_number": certificate.certificate_number,
        "student_name": certificate.user.full_name,
        "course_title": certificate.course.title,
        "issued_at": certificate.issued_at,
    }


# ============== Branding & PDF ==============

async def get_certificate_branding(db: AsyncSession) -> dict:
    """
    Theme colour and logo used on certificates.

    Never fails: on any database error the defaults are returned.
    """
    try:
        values = await settings_service.get_all_settings(db)
    except SQLAlchemyError:
        logger.exception("Could not read certificate settings, using defaults")
        values = {}

    theme_color = values.get(settings_service.THEME_COLOR_KEY) or settings.DEFAULT_THEME_COLOR
    logo_url = await load_logo_data_url(values.get(settings_service.LOGO_URL_KEY))
    return {"theme_color": theme_color, "logo_url": logo_url}


async def build_certificate_pdf(
    certificate_id: uuid.UUID,
    user: User,
    db: AsyncSession,
) -> tuple[str, bytes]:
    """
    Render the PDF of an issued certificate.

    Args:
        certificate_id: Certificate to render.
        user: Requesting user; must own the certificate or be an admin.
        db: Database session.

    Returns:
        Tuple of (certificate_number, pdf_bytes).

    Raises:
        HTTPException: 404 if missing, 403 if not the owner.
    """
    certificate = await get_certificate(certificate_id, db)

    if certificate.user_id != user.id and user.role != UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to access this certificate",
        )

    branding = await get_certificate_branding(db)
    course = certificate.course
    pdf_bytes = render_certificate_pdf(
        CertificateData(
            student_name=certificate.user.full_name,
            course_name=course.title,
            completion_date=format_completion_date(certificate.issued_at),
            certificate_number=certificate.certificate_number,
            instructor_name=course.instructor_name or settings.DEFAULT_INSTRUCTOR_NAME,
            duration=course.duration or "N/A",
            theme_color=branding["theme_color"],
            logo_data_url=branding["logo_url"],
        )
    )

    logger.info("Rendered certificate %s for user %s", certificate.certificate_number, user.id)
    return certificate.certificate_number, pdf_bytes


async def build_preview_pdf(
    student_name: Optional[str],
    course_name: Optional[str],
    certificate_number: Optional[str],
    instructor_name: Optional[str],
    duration: Optional[str],
    db: AsyncSession,
) -> bytes:
    """
    Render an ad-hoc certificate dated today.

    Raises:
        HTTPException: 400 if the student name, course name or number is missing.
    """
    if not student_name or not course_name or not certificate_number:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing required fields",
        )

    branding = await get_certificate_branding(db)
    return render_certificate_pdf(
        CertificateData(
            student_name=student_name,
            course_name=course_name,
            completion_date=format_completion_date(datetime.now(timezone.utc)),
            certificate_number=certificate_number,
            instructor_name=instructor_name or settings.DEFAULT_INSTRUCTOR_NAME,
            duration=duration or "N/A",
            theme_color=branding["theme_color"],
            logo_data_url=branding["logo_url"],
        )
    )
