"""
Payment Schemas

Pydantic models for payment submission and review.
"""

import uuid
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from app.models.enums import PaymentStatus


class PaymentCreate(BaseModel):
    """Schema for submitting a payment for a course."""

    course_id: int
    amount: Decimal = Field(..., ge=0)
    payment_method: str = Field(..., min_length=1, max_length=50)
    invoice_number: Optional[str] = Field(
        None, max_length=64, description="Generated when omitted"
    )
    proof_url: Optional[str] = Field(None, max_length=512)


class PaymentResponse(BaseModel):
    """Schema for payment response."""

    id: int
    user_id: uuid.UUID
    course_id: int
    enrollment_id: Optional[int] = None
    amount: Decimal
    status: PaymentStatus
    payment_method: str
    invoice_number: str
    proof_url: Optional[str] = None
    created_at: datetime
    verified_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
