"""Sheets Payment Repository Implementation

Every payment write recomputes the parent invoice's paid amount, balance
and status through the invoice repository.
"""

import logging
from decimal import Decimal
from typing import Callable, List, Optional

from src.adapter.repositories.sheets_base import SheetsEntityRepository, patch_values
from src.adapter.services.cache import TTLCache
from src.adapter.sheets.table import SheetTable
from src.app.errors import ValidationError
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.payment_repository import PaymentRepository
from src.domain.base import utcnow
from src.domain.payment import Payment, PaymentCreate, PaymentUpdate

logger = logging.getLogger(__name__)


class SheetsPaymentRepository(SheetsEntityRepository[Payment], PaymentRepository):
    """Payment store on the ``Payments`` table"""

    entity_name = "payment"

    def __init__(
        self,
        table: SheetTable[Payment],
        cache: TTLCache,
        invoices: InvoiceRepository,
        now: Callable = utcnow,
    ):
        super().__init__(table, cache, now)
        self.invoices = invoices

    async def list_by_invoice(self, invoice_id: str) -> List[Payment]:
        return await self._list_cached(
            f"by_invoice:{invoice_id}", lambda payment: payment.invoice_id == invoice_id
        )

    async def recompute_invoice(self, invoice_id: str) -> None:
        """Sum the invoice's payments and store the result on the invoice"""
        payments = await self.find_all(lambda payment: payment.invoice_id == invoice_id)
        paid_amount = sum((payment.amount for payment in payments), Decimal("0"))
        await self.invoices.apply_payments(invoice_id, paid_amount)

    async def create(self, data: PaymentCreate) -> Payment:
        if await self.invoices.get(data.invoice_id) is None:
            raise ValidationError(f"Invoice {data.invoice_id} not found", operation="create_payment")

        now = self._now()
        payment = Payment(
            invoice_id=data.invoice_id,
            amount=data.amount,
            payment_date=data.payment_date or now,
            payment_method=data.payment_method,
            notes=data.notes,
            created_at=now,
        )
        await self.table.append([payment])
        self.invalidate()
        await self.recompute_invoice(payment.invoice_id)
        logger.info(f"Recorded payment {payment.id} of {payment.amount} for invoice {payment.invoice_id}")
        return payment

    async def update(self, payment_id: str, patch: PaymentUpdate) -> Optional[Payment]:
        values = patch_values(patch, Payment)
        payment = await self._update_row(payment_id, lambda payment: payment.model_copy(update=values))
        if payment is not None and "amount" in values:
            await self.recompute_invoice(payment.invoice_id)
        return payment

    async def delete(self, payment_id: str) -> bool:
        found = await self.table.find(payment_id)
        if found is None:
            return False
        row_number, payment = found
        await self.table.delete_rows([row_number])
        self.invalidate()
        await self.recompute_invoice(payment.invoice_id)
        return True
