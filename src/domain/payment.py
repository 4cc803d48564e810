"""Payment Domain Entity

Money received against an invoice.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import Field

from src.domain.base import BaseModel, generate_id, utcnow


class PaymentMethod(str, Enum):
    """Accepted payment methods"""
    CASH = "cash"
    CHECK = "check"
    CREDIT_CARD = "credit_card"
    BANK_TRANSFER = "bank_transfer"
    PAYPAL = "paypal"
    OTHER = "other"


class Payment(BaseModel):
    """
    Payment - Amount received for an invoice

    Domain Rules:
    - amount > 0 (enforced on create)
    - Creating or deleting a payment recomputes the parent invoice's
      paid_amount, balance and status
    """

    id: str = Field(default_factory=generate_id, description="Payment identifier")
    invoice_id: str = Field(default="", description="Invoice this payment applies to")
    amount: Decimal = Field(default=Decimal("0"), description="Amount received")
    payment_date: datetime = Field(default_factory=utcnow, description="Date the payment was received")
    payment_method: PaymentMethod = Field(default=PaymentMethod.OTHER, description="How it was paid")
    notes: Optional[str] = Field(default=None, description="Free-form notes")
    created_at: datetime = Field(default_factory=utcnow, description="Creation timestamp")


class PaymentCreate(BaseModel):
    invoice_id: str
    amount: Decimal = Field(..., gt=0)
    payment_date: Optional[datetime] = None
    payment_method: PaymentMethod = PaymentMethod.OTHER
    notes: Optional[str] = None


class PaymentUpdate(BaseModel):
    amount: Optional[Decimal] = Field(default=None, gt=0)
    payment_date: Optional[datetime] = None
    payment_method: Optional[PaymentMethod] = None
    notes: Optional[str] = None
