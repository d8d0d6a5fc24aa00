"""
Payment Routes

Payment submission for students and verification for admins.
"""

from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_user, require_admin
from app.core.database import get_db
from app.models.enums import PaymentStatus
from app.models.user import User
from app.schemas.payment import PaymentCreate, PaymentResponse
from app.services import payment_service


router = APIRouter(prefix="/payments", tags=["Payments"])


@router.post(
    "",
    response_model=PaymentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a payment for a course",
)
async def create_payment(
    data: PaymentCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """
    Submit a payment awaiting admin verification.

    An invoice number is generated when none is supplied.
    """
    return await payment_service.create_payment(current_user, data, db)


@router.get(
    "/me",
    response_model=List[PaymentResponse],
    summary="Get my payments",
)
async def get_my_payments(
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    return await payment_service.get_user_payments(current_user, db)


@router.get(
    "",
    response_model=List[PaymentResponse],
    summary="List payments (admin)",
)
async def list_payments(
    _: Annotated[User, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
    payment_status: Optional[PaymentStatus] = Query(None, alias="status"),
):
    return await payment_service.get_all_payments(db, payment_status)


@router.post(
    "/{payment_id}/verify",
    response_model=PaymentResponse,
    summary="Verify a payment (admin)",
)
async def verify_payment(
    payment_id: int,
    _: Annotated[User, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    """
    Mark a pending payment as verified and activate the student's enrollment.

    Raises:
        HTTPException: 404 if not found, 400 if not pending.
    """
    return await payment_service.verify_payment(payment_id, db)


@router.post(
    "/{payment_id}/reject",
    response_model=PaymentResponse,
    summary="Reject a payment (admin)",
)
async def reject_payment(
    payment_id: int,
    _: Annotated[User, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db)],
):
    return await payment_service.reject_payment(payment_id, db)
