"""Data Transfer Objects for Billing Use Cases

Pydantic models for command inputs and response outputs.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from src.domain.invoice import Invoice
from src.domain.payment import Payment


class PaymentRecordedDTO(BaseModel):
    """
    Response DTO for a recorded payment

    Carries the payment and the parent invoice after its paid amount,
    balance and status were recomputed.
    """

    payment: Payment = Field(
        ...,
        description="Stored payment"
    )

    invoice: Optional[Invoice] = Field(
        default=None,
        description="Parent invoice after recomputation"
    )


class RecurringInvoiceFailureDTO(BaseModel):
    invoice_id: str
    invoice_number: str
    reason: str


class RecurringInvoiceRunDTO(BaseModel):
    """
    Summary of one recurring invoice generation run

    Used as output of ProcessRecurringInvoices and the recurring worker.
    """

    total_due: int = Field(
        ...,
        ge=0,
        description="Recurring invoices that were due at run time"
    )

    generated: int = Field(
        ...,
        ge=0,
        description="Invoices generated successfully"
    )

    failed: int = Field(
        ...,
        ge=0,
        description="Recurring invoices that could not be processed"
    )

    generated_invoice_ids: List[str] = Field(
        default_factory=list,
        description="Ids of the generated invoices"
    )

    failures: List[RecurringInvoiceFailureDTO] = Field(
        default_factory=list,
        description="Per-invoice failure details"
    )

    run_at: datetime = Field(
        ...,
        description="Reference time used for the due check"
    )

    execution_time_ms: int = Field(
        default=0,
        ge=0,
        description="Run duration in milliseconds"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "total_due": 3,
                "generated": 2,
                "failed": 1,
                "generated_invoice_ids": ["18c2f9a1b3e4d5f6a7", "18c2f9a1b3e4d5f6a8"],
                "failures": [
                    {"invoice_id": "18c2f9a0", "invoice_number": "INV-2024-0003", "reason": "Rate limit exceeded"}
                ],
                "run_at": "2024-03-15T00:00:00+00:00",
                "execution_time_ms": 5234,
            }
        }
