"""Sheets Invoice Repository Implementation

Invoices live in the ``Invoices`` table; their line items in ``LineItems``
keyed by invoice id. Also hosts the recurring invoice engine.
"""

import logging
import re
from collections import defaultdict
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable, Dict, List, Optional

from src.adapter.repositories.sheets_base import SheetsEntityRepository, patch_values
from src.adapter.services.cache import TTLCache
from src.adapter.sheets.codecs import OwnedLineItem
from src.adapter.sheets.saga import DeleteSaga
from src.adapter.sheets.table import SheetTable
from src.app.errors import ValidationError
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.base import utcnow
from src.domain.invoice import (
    Invoice,
    InvoiceCreate,
    InvoiceStatus,
    InvoiceUpdate,
    LineItem,
    LineItemInput,
)
from src.domain.recurring import calculate_next_invoice_date

logger = logging.getLogger(__name__)


class SheetsInvoiceRepository(SheetsEntityRepository[Invoice], InvoiceRepository):
    """
    Invoice store

    Domain Rules:
    - Totals are recomputed whenever line items or the tax rate change
    - Deleting an invoice deletes its line items; payments are kept
    - Generated invoice numbers follow <PREFIX>-YYYY-NNNN per calendar year
    """

    entity_name = "invoice"

    def __init__(
        self,
        table: SheetTable[Invoice],
        line_items: SheetTable[OwnedLineItem],
        cache: TTLCache,
        invoice_prefix: str = "INV",
        due_days: int = 30,
        now: Callable[[], datetime] = utcnow,
    ):
        super().__init__(table, cache, now)
        self.line_items = line_items
        self.invoice_prefix = invoice_prefix
        self.due_days = due_days

    # --- line items -----------------------------------------------------

    async def _hydrate(self, invoices: List[Invoice]) -> List[Invoice]:
        grouped: Dict[str, List[LineItem]] = defaultdict(list)
        for item in await self.line_items.read_all():
            grouped[item.parent_id].append(item.to_line_item())
        for invoice in invoices:
            invoice.line_items = grouped.get(invoice.id, [])
        return invoices

    async def _items_of(self, invoice_id: str) -> List[LineItem]:
        rows = await self.line_items.find_where(lambda item: item.parent_id == invoice_id)
        return [item.to_line_item() for _, item in rows]

    async def _delete_items(self, invoice_id: str) -> int:
        rows = await self.line_items.find_where(lambda item: item.parent_id == invoice_id)
        return await self.line_items.delete_rows(row_number for row_number, _ in rows)

    async def _append_items(self, invoice_id: str, items: List[LineItem]) -> None:
        await self.line_items.append(
            [OwnedLineItem.from_line_item(invoice_id, item) for item in items]
        )

    # --- queries ----------------------------------------------------------

    async def list_by_client(self, client_id: str) -> List[Invoice]:
        return await self._list_cached(
            f"by_client:{client_id}", lambda invoice: invoice.client_id == client_id
        )

    async def list_by_status(self, status: InvoiceStatus) -> List[Invoice]:
        status = InvoiceStatus(status)
        return await self._list_cached(
            f"by_status:{status.value}", lambda invoice: invoice.status == status
        )

    async def generate_invoice_number(self) -> str:
        prefix = f"{self.invoice_prefix}-{self._now().year}-"
        pattern = re.compile(rf"^{re.escape(prefix)}(\d+)$")
        highest = 0
        for invoice in await self.load_all():
            match = pattern.match(invoice.invoice_number)
            if match:
                highest = max(highest, int(match.group(1)))
        return f"{prefix}{highest + 1:04d}"

    # --- writes -----------------------------------------------------------

    async def create(self, data: InvoiceCreate) -> Invoice:
        now = self._now()
        invoice = Invoice(
            invoice_number=await self.generate_invoice_number(),
            client_id=data.client_id,
            template_id=data.template_id,
            status=data.status,
            issue_date=data.issue_date or now,
            due_date=data.due_date or now + timedelta(days=self.due_days),
            line_items=[item.to_line_item() for item in data.line_items],
            tax_rate=data.tax_rate,
            notes=data.notes,
            is_recurring=data.is_recurring,
            recurring_schedule=data.recurring_schedule,
            sent_date=now if data.status == InvoiceStatus.SENT else None,
            created_at=now,
            updated_at=now,
        ).recalculate_totals()

        await self.table.append([invoice])
        await self._append_items(invoice.id, invoice.line_items)
        self.invalidate()
        logger.info(f"Created invoice {invoice.invoice_number} ({invoice.id}) total={invoice.total}")
        return invoice

    async def update(self, invoice_id: str, patch: InvoiceUpdate) -> Optional[Invoice]:
        found = await self.table.find(invoice_id)
        if found is None:
            return None
        row_number, invoice = found
        now = self._now()

        values = patch_values(patch, Invoice, exclude=("line_items",))
        invoice = invoice.model_copy(update=values)

        replace_items = "line_items" in patch.model_fields_set and patch.line_items is not None
        if replace_items:
            invoice.line_items = [item.to_line_item() for item in patch.line_items]
        else:
            invoice.line_items = await self._items_of(invoice_id)

        if replace_items or "tax_rate" in values:
            invoice.recalculate_totals()
            if invoice.paid_amount > 0:
                invoice.apply_payments(invoice.paid_amount, now)
        if values.get("status") == InvoiceStatus.SENT and "sent_date" not in values:
            invoice.sent_date = now
        if values.get("status") == InvoiceStatus.PAID:
            invoice.mark_paid()

        invoice.updated_at = now
        await self.table.write_row(row_number, invoice)
        if replace_items:
            await self._delete_items(invoice_id)
            await self._append_items(invoice_id, invoice.line_items)
        self.invalidate()
        return invoice

    async def delete(self, invoice_id: str) -> bool:
        if await self.table.find(invoice_id) is None:
            return False
        saga = DeleteSaga(f"delete_invoice:{invoice_id}")
        saga.add_step("delete_line_items", lambda: self._delete_items(invoice_id))
        saga.add_step("delete_invoice", lambda: self._delete_row(invoice_id))
        try:
            await saga.run()
        finally:
            self.invalidate()
        return True

    async def _update_with_items(self, invoice_id: str, mutate: Callable[[Invoice], Optional[Invoice]]) -> Optional[Invoice]:
        invoice = await self._update_row(invoice_id, mutate)
        if invoice is not None:
            invoice.line_items = await self._items_of(invoice_id)
        return invoice

    async def mark_paid(self, invoice_id: str) -> Optional[Invoice]:
        return await self._update_with_items(invoice_id, lambda invoice: invoice.mark_paid())

    async def apply_payments(self, invoice_id: str, paid_amount: Decimal) -> Optional[Invoice]:
        now = self._now()
        invoice = await self._update_with_items(
            invoice_id, lambda invoice: invoice.apply_payments(paid_amount, now)
        )
        if invoice is None:
            logger.warning(f"Payments recorded for missing invoice {invoice_id}")
        return invoice

    # --- recurring ----------------------------------------------------------

    async def get_recurring_invoices(self) -> List[Invoice]:
        return [
            invoice for invoice in await self.list()
            if invoice.is_recurring and invoice.recurring_schedule is not None
        ]

    async def get_recurring_invoices_due(self, now: Optional[datetime] = None) -> List[Invoice]:
        now = now or self._now()
        return [invoice for invoice in await self.get_recurring_invoices() if invoice.is_recurring_due(now)]

    async def generate_recurring_invoice(self, template_invoice: Invoice) -> Invoice:
        schedule = template_invoice.recurring_schedule
        if not template_invoice.is_recurring or schedule is None:
            raise ValidationError(
                f"Invoice {template_invoice.id} is not recurring",
                operation="generate_recurring_invoice",
            )

        now = self._now()
        generated = await self.create(
            InvoiceCreate(
                client_id=template_invoice.client_id,
                template_id=template_invoice.template_id,
                status=InvoiceStatus.DRAFT,
                issue_date=now,
                due_date=now + timedelta(days=self.due_days),
                line_items=[
                    LineItemInput(description=item.description, quantity=item.quantity, rate=item.rate)
                    for item in template_invoice.line_items
                ],
                tax_rate=template_invoice.tax_rate,
                notes=template_invoice.notes,
                is_recurring=False,
            )
        )

        next_date = calculate_next_invoice_date(
            schedule.next_invoice_date, schedule.frequency, schedule.interval
        )

        def advance(invoice: Invoice) -> Optional[Invoice]:
            if invoice.recurring_schedule is None:
                return None
            invoice.recurring_schedule = invoice.recurring_schedule.model_copy(
                update={"next_invoice_date": next_date}
            )
            return invoice

        await self._update_row(template_invoice.id, advance)
        logger.info(
            f"Generated {generated.invoice_number} from recurring invoice {template_invoice.id}; "
            f"next run {next_date.isoformat()}"
        )
        return generated

    async def toggle_recurring_invoice(self, invoice_id: str) -> Optional[Invoice]:
        def toggle(invoice: Invoice) -> Optional[Invoice]:
            if not invoice.is_recurring or invoice.recurring_schedule is None:
                return None
            invoice.recurring_schedule = invoice.recurring_schedule.model_copy(
                update={"is_active": not invoice.recurring_schedule.is_active}
            )
            return invoice

        return await self._update_with_items(invoice_id, toggle)
