"""Invoice Domain Entity

Tracks invoices, their line items, and payment status.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import ConfigDict, Field

from src.domain.base import BaseModel, generate_id, utcnow
from src.domain.recurring import RecurringSchedule

HUNDRED = Decimal("100")


class InvoiceStatus(str, Enum):
    """Invoice status types"""
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class LineItem(BaseModel):
    """
    Line Item - Individual billable row on an invoice or template

    Domain Rules:
    - amount = quantity * rate (recomputed, never trusted from storage)
    """

    id: str = Field(default_factory=generate_id, description="Line item identifier")
    description: str = Field(default="", description="What is being billed")
    quantity: Decimal = Field(default=Decimal("0"), description="Quantity (hours, units, ...)")
    rate: Decimal = Field(default=Decimal("0"), description="Price per unit")
    amount: Decimal = Field(default=Decimal("0"), description="quantity * rate")

    def with_amount(self) -> "LineItem":
        return self.model_copy(update={"amount": self.quantity * self.rate})


class LineItemInput(BaseModel):
    """Line item as supplied by callers (amount and id are always derived)"""

    description: str
    quantity: Decimal = Decimal("0")
    rate: Decimal = Decimal("0")

    def to_line_item(self) -> LineItem:
        return LineItem(
            description=self.description, quantity=self.quantity, rate=self.rate
        ).with_amount()


class Invoice(BaseModel):
    """
    Invoice - Billing document sent to a client

    Domain Rules:
    - total = subtotal + tax_amount
    - balance = total - paid_amount
    - balance <= 0 after a payment => status = paid
    - tax_rate is a percentage (10 = 10%)
    - Line items live in their own table keyed by invoice id
    - Recurring invoices act as templates for generated invoices
    """

    id: str = Field(default_factory=generate_id, description="Invoice identifier")
    invoice_number: str = Field(default="", description="Human readable number (e.g., INV-2024-0001)")
    client_id: str = Field(default="", description="Client this invoice bills")
    template_id: Optional[str] = Field(default=None, description="Template the invoice was built from")
    status: InvoiceStatus = Field(default=InvoiceStatus.DRAFT, description="Invoice status")
    issue_date: datetime = Field(default_factory=utcnow, description="Issue date")
    due_date: datetime = Field(default_factory=utcnow, description="Payment due date")
    line_items: List[LineItem] = Field(default_factory=list, description="Billable rows")
    subtotal: Decimal = Field(default=Decimal("0"), description="Sum of line item amounts")
    tax_rate: Decimal = Field(default=Decimal("0"), description="Tax percentage")
    tax_amount: Decimal = Field(default=Decimal("0"), description="subtotal * tax_rate / 100")
    total: Decimal = Field(default=Decimal("0"), description="subtotal + tax_amount")
    paid_amount: Decimal = Field(default=Decimal("0"), description="Sum of recorded payments")
    balance: Decimal = Field(default=Decimal("0"), description="total - paid_amount")
    notes: Optional[str] = Field(default=None, description="Free-form notes")
    is_recurring: bool = Field(default=False, description="Whether this invoice is a recurring template")
    recurring_schedule: Optional[RecurringSchedule] = Field(default=None, description="Recurring schedule")
    sent_date: Optional[datetime] = Field(default=None, description="When the invoice was sent")
    created_at: datetime = Field(default_factory=utcnow, description="Creation timestamp")
    updated_at: datetime = Field(default_factory=utcnow, description="Last update timestamp")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "18c2f9a1b3e4d5f6a7",
                "invoice_number": "INV-2024-0001",
                "client_id": "18c2f9a0aa01b2c3d4",
                "status": "sent",
                "line_items": [
                    {"id": "li1", "description": "Design", "quantity": "2", "rate": "50", "amount": "100"},
                ],
                "subtotal": "100",
                "tax_rate": "10",
                "tax_amount": "10",
                "total": "110",
                "paid_amount": "0",
                "balance": "110",
                "is_recurring": False,
            }
        }
    )

    def recalculate_totals(self) -> "Invoice":
        """Recompute line amounts, subtotal, tax, total and balance in place"""
        self.line_items = [item.with_amount() for item in self.line_items]
        self.subtotal = sum((item.amount for item in self.line_items), Decimal("0"))
        self.tax_amount = self.subtotal * self.tax_rate / HUNDRED
        self.total = self.subtotal + self.tax_amount
        self.balance = self.total - self.paid_amount
        return self

    def mark_paid(self) -> "Invoice":
        self.paid_amount = self.total
        self.balance = Decimal("0")
        self.status = InvoiceStatus.PAID
        return self

    def apply_payments(self, paid_amount: Decimal, now: datetime) -> "Invoice":
        """
        Apply the sum of recorded payments and derive the status

        Args:
            paid_amount: Sum of all payments for this invoice
            now: Reference time for the overdue check
        """
        self.paid_amount = max(Decimal("0"), paid_amount)
        self.balance = self.total - self.paid_amount

        if self.status == InvoiceStatus.CANCELLED:
            return self

        if self.balance <= 0:
            self.status = InvoiceStatus.PAID
            return self

        if self.status == InvoiceStatus.PAID:
            self.status = InvoiceStatus.SENT
        if self.status == InvoiceStatus.DRAFT and self.paid_amount > 0:
            self.status = InvoiceStatus.SENT
        if self.status == InvoiceStatus.SENT and self.due_date < now:
            self.status = InvoiceStatus.OVERDUE
        return self

    def is_recurring_due(self, now: datetime) -> bool:
        schedule = self.recurring_schedule
        if not self.is_recurring or schedule is None or not schedule.is_active:
            return False
        if schedule.next_invoice_date > now:
            return False
        return schedule.end_date is None or schedule.end_date > now


class InvoiceCreate(BaseModel):
    """Data required to create an invoice"""

    client_id: str
    template_id: Optional[str] = None
    status: InvoiceStatus = InvoiceStatus.DRAFT
    issue_date: Optional[datetime] = None
    due_date: Optional[datetime] = None
    line_items: List[LineItemInput] = Field(default_factory=list)
    tax_rate: Decimal = Decimal("0")
    notes: Optional[str] = None
    is_recurring: bool = False
    recurring_schedule: Optional[RecurringSchedule] = None


class InvoiceUpdate(BaseModel):
    """Partial invoice update; only explicitly set fields are applied"""

    client_id: Optional[str] = None
    template_id: Optional[str] = None
    status: Optional[InvoiceStatus] = None
    issue_date: Optional[datetime] = None
    due_date: Optional[datetime] = None
    line_items: Optional[List[LineItemInput]] = None
    tax_rate: Optional[Decimal] = None
    notes: Optional[str] = None
    is_recurring: Optional[bool] = None
    recurring_schedule: Optional[RecurringSchedule] = None
    sent_date: Optional[datetime] = None
