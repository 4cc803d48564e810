"""Invoice Repository Interface

Defines the contract for invoice persistence, including line items and
the recurring invoice engine.
"""

from abc import abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from src.app.repositories.base import EntityRepository
from src.domain.invoice import Invoice, InvoiceCreate, InvoiceStatus, InvoiceUpdate


class InvoiceRepository(EntityRepository[Invoice, InvoiceCreate, InvoiceUpdate]):
    """
    Repository interface for Invoice persistence

    Invoices are returned with their line items attached.
    """

    @abstractmethod
    async def list_by_client(self, client_id: str) -> List[Invoice]:
        pass

    @abstractmethod
    async def list_by_status(self, status: InvoiceStatus) -> List[Invoice]:
        pass

    @abstractmethod
    async def mark_paid(self, invoice_id: str) -> Optional[Invoice]:
        """
        Mark an invoice fully paid (paid_amount = total, balance = 0)

        Returns:
            Updated Invoice, or None if it does not exist
        """
        pass

    @abstractmethod
    async def apply_payments(self, invoice_id: str, paid_amount: Decimal) -> Optional[Invoice]:
        """
        Store a new payment total and derive balance and status from it

        Args:
            invoice_id: Invoice identifier
            paid_amount: Sum of all payments recorded for the invoice

        Returns:
            Updated Invoice, or None if it does not exist
        """
        pass

    @abstractmethod
    async def generate_invoice_number(self) -> str:
        """
        Generate the next invoice number

        Format: <PREFIX>-YYYY-NNNN (e.g., INV-2024-0001)
        """
        pass

    @abstractmethod
    async def get_recurring_invoices(self) -> List[Invoice]:
        pass

    @abstractmethod
    async def get_recurring_invoices_due(self, now: Optional[datetime] = None) -> List[Invoice]:
        """
        Recurring invoices whose schedule is active, due and not ended

        Args:
            now: Reference time (defaults to the current UTC time)
        """
        pass

    @abstractmethod
    async def generate_recurring_invoice(self, template_invoice: Invoice) -> Invoice:
        """
        Create the next invoice of a recurring series

        The new invoice is a non-recurring draft copying client, line items,
        tax rate and notes. The recurring invoice's next_invoice_date is
        advanced afterwards.

        Returns:
            The generated Invoice
        """
        pass

    @abstractmethod
    async def toggle_recurring_invoice(self, invoice_id: str) -> Optional[Invoice]:
        """Flip the schedule's is_active flag; None if absent or not recurring"""
        pass
