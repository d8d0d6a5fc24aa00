"""
Certificate Routes

Endpoints for claiming, verifying and downloading certificates.
"""

import uuid
from typing import Annotated, List

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, require_admin
from app.core.database import get_db
from app.models.user import User
from app.schemas.certificate import (
    CertificateBranding,
    CertificateClaim,
    CertificatePreviewRequest,
    CertificateVerification,
    CertificateWithCourse,
)
from app.services import certificate_service


router = APIRouter(prefix="/certificates", tags=["Certificates"])


def pdf_response(pdf_bytes: bytes, certificate_number: str, no_cache: bool = False) -> Response:
    """Wrap rendered PDF bytes as a download."""
    headers = {
        "Content-Disposition": f'attachment; filename="certificate-{certificate_number}.pdf"',
    }
    if no_cache:
        headers.update({
            "Cache-Control": "no-cache, no-store, must-revalidate",
            "Pragma": "no-cache",
            "Expires": "0",
        })
    return Response(content=pdf_bytes, media_type="application/pdf", headers=headers)


@router.get(
    "/me",
    response_model=List[CertificateWithCourse],
    summary="List my certificates",
)
async def list_my_certificates(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    return await certificate_service.get_user_certificates(current_user, db)


@router.get(
    "",
    response_model=List[CertificateWithCourse],
    summary="List all certificates (admin)",
)
async def list_certificates(
    _: Annotated[User, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    return await certificate_service.get_all_certificates(db)


@router.post(
    "/claim",
    response_model=CertificateWithCourse,
    summary="Claim the certificate of a completed enrollment",
)
async def claim_certificate(
    data: CertificateClaim,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """
    Claim a certificate for a completed course.

    **Requirements:**
    - The enrollment belongs to the user (or the user is an admin)
    - The enrollment is COMPLETED

    Returns the existing certificate when one was already issued.
    """
    return await certificate_service.claim_certificate(current_user, data.enrollment_id, db)


@router.get(
    "/settings",
    response_model=CertificateBranding,
    summary="Certificate theme colour and logo",
)
async def get_certificate_settings(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CertificateBranding:
    """
    Theme colour and logo (as a data URL) used on certificates.

    Always succeeds; defaults are returned when settings cannot be read.
    """
    branding = await certificate_service.get_certificate_branding(db)
    return CertificateBranding(**branding)


@router.get(
    "/generate",
    summary="Download a certificate as PDF",
    response_class=Response,
    responses={200: {"content": {"application/pdf": {}}}},
)
async def generate_certificate(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
    certificate_id: uuid.UUID = Query(..., description="Certificate to render"),
) -> Response:
    """
    Render an issued certificate as a PDF.

    Only the owner or an admin may download it.

    Raises:
        HTTPException: 404 if not found, 403 if not the owner.
    """
    certificate_number, pdf_bytes = await certificate_service.build_certificate_pdf(
        certificate_id, current_user, db
    )
    return pdf_response(pdf_bytes, certificate_number, no_cache=True)


@router.post(
    "/generate",
    summary="Render a preview certificate as PDF",
    response_class=Response,
    responses={200: {"content": {"application/pdf": {}}}},
)
async def generate_preview_certificate(
    data: CertificatePreviewRequest,
    _: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> Response:
    """
    Render an ad-hoc certificate dated today.

    Raises:
        HTTPException: 400 if student name, course name or number is missing.
    """
    pdf_bytes = await certificate_service.build_preview_pdf(
        student_name=data.student_name,
        course_name=data.course_name,
        certificate_number=data.certificate_number,
        instructor_name=data.instructor_name,
        duration=data.duration,
        db=db,
    )
    return pdf_response(pdf_bytes, data.certificate_number)


@router.get(
    "/verify/{certificate_number}",
    response_model=CertificateVerification,
    summary="Verify certificate",
)
async def verify_certificate(
    certificate_number: str,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> CertificateVerification:
    """
    Verify a certificate by its number.

    Public endpoint for verification links.
    """
    result = await certificate_service.verify_certificate(certificate_number, db)
    return CertificateVerification(**result)
