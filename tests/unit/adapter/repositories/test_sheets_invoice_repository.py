from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from src.adapter.sheets.schema import INVOICES, LINE_ITEMS
from src.app.errors import CascadeError, ValidationError
from src.domain.invoice import InvoiceCreate, InvoiceStatus, InvoiceUpdate, LineItemInput
from src.domain.recurring import RecurringFrequency, RecurringSchedule
from tests.fakes import http_error


def invoice_data(**overrides) -> InvoiceCreate:
    values = dict(
        client_id="client-1",
        line_items=[
            LineItemInput(description="Design", quantity=Decimal("2"), rate=Decimal("50")),
            LineItemInput(description="Hosting", quantity=Decimal("1"), rate=Decimal("25")),
        ],
        tax_rate=Decimal("10"),
    )
    values.update(overrides)
    return InvoiceCreate(**values)


def monthly_schedule(next_date: datetime, **overrides) -> RecurringSchedule:
    values = dict(
        frequency=RecurringFrequency.MONTHLY,
        interval=1,
        start_date=next_date,
        next_invoice_date=next_date,
    )
    values.update(overrides)
    return RecurringSchedule(**values)


@pytest.mark.asyncio
class TestSheetsInvoiceRepository:
    """Invoice store over the in-memory spreadsheet"""

    async def test_create_computes_totals_and_stores_line_items(self, store, fake_client, now):
        # Act
        invoice = await store.invoices.create(invoice_data())

        # Assert
        assert invoice.subtotal == Decimal("125")
        assert invoice.tax_amount == Decimal("12.5")
        assert invoice.total == Decimal("137.5")
        assert invoice.balance == Decimal("137.5")
        assert invoice.invoice_number == "INV-2024-0001"
        assert invoice.due_date == now + timedelta(days=30)
        assert len(fake_client.data_rows(INVOICES)) == 1
        assert [row[1] for row in fake_client.data_rows(LINE_ITEMS)] == [invoice.id, invoice.id]

        stored = await store.invoices.get(invoice.id)
        assert stored.total == Decimal("137.5")
        assert [item.amount for item in stored.line_items] == [Decimal("100"), Decimal("25")]

    async def test_invoice_numbers_increment_within_year(self, store):
        first = await store.invoices.create(invoice_data())
        second = await store.invoices.create(invoice_data())

        assert first.invoice_number == "INV-2024-0001"
        assert second.invoice_number == "INV-2024-0002"
        assert await store.invoices.generate_invoice_number() == "INV-2024-0003"

    async def test_sent_invoice_gets_sent_date(self, store, now):
        invoice = await store.invoices.create(invoice_data(status=InvoiceStatus.SENT))

        assert invoice.sent_date == now

    async def test_get_missing_returns_none(self, store):
        assert await store.invoices.get("missing") is None
        assert await store.invoices.update("missing", InvoiceUpdate(notes="x")) is None
        assert await store.invoices.delete("missing") is False

    async def test_filtered_views(self, store):
        draft = await store.invoices.create(invoice_data(client_id="client-1"))
        sent = await store.invoices.create(invoice_data(client_id="client-2", status=InvoiceStatus.SENT))

        assert [i.id for i in await store.invoices.list_by_client("client-2")] == [sent.id]
        assert [i.id for i in await store.invoices.list_by_status(InvoiceStatus.DRAFT)] == [draft.id]
        assert len(await store.invoices.list()) == 2

    async def test_update_line_items_recalculates_and_replaces_rows(self, store, fake_client):
        # Arrange
        invoice = await store.invoices.create(invoice_data())

        # Act
        updated = await store.invoices.update(
            invoice.id,
            InvoiceUpdate(line_items=[LineItemInput(description="Audit", quantity=Decimal("4"), rate=Decimal("100"))]),
        )

        # Assert
        assert updated.subtotal == Decimal("400")
        assert updated.total == Decimal("440")
        assert [row[2] for row in fake_client.data_rows(LINE_ITEMS)] == ["Audit"]
        stored = await store.invoices.get(invoice.id)
        assert stored.total == Decimal("440")
        assert [item.description for item in stored.line_items] == ["Audit"]

    async def test_update_notes_keeps_items_and_totals(self, store):
        invoice = await store.invoices.create(invoice_data())

        updated = await store.invoices.update(invoice.id, InvoiceUpdate(notes="Thanks!"))

        assert updated.notes == "Thanks!"
        assert updated.total == Decimal("137.5")
        assert len(updated.line_items) == 2

    async def test_explicit_null_for_required_field_is_ignored(self, store):
        """
        GIVEN an invoice with a 10% tax rate
        WHEN an update sends null for tax_rate and status but sets notes
        THEN the stored rate, status and totals are kept and notes change
        """
        invoice = await store.invoices.create(invoice_data())

        updated = await store.invoices.update(
            invoice.id, InvoiceUpdate.model_validate({"tax_rate": None, "status": None, "notes": "Net 30"})
        )

        assert updated.tax_rate == Decimal("10")
        assert updated.status == InvoiceStatus.DRAFT
        assert updated.total == Decimal("137.5")
        assert updated.notes == "Net 30"
        assert (await store.invoices.get(invoice.id)).tax_rate == Decimal("10")

    async def test_explicit_null_clears_optional_field(self, store):
        invoice = await store.invoices.create(invoice_data(notes="Net 30"))

        updated = await store.invoices.update(invoice.id, InvoiceUpdate.model_validate({"notes": None}))

        assert updated.notes is None

    async def test_cutting_total_below_paid_amount_marks_paid(self, store):
        # Arrange
        invoice = await store.invoices.create(invoice_data(status=InvoiceStatus.SENT))
        await store.invoices.apply_payments(invoice.id, Decimal("100"))

        # Act
        updated = await store.invoices.update(
            invoice.id,
            InvoiceUpdate(line_items=[LineItemInput(description="Audit", quantity=Decimal("1"), rate=Decimal("50"))]),
        )

        # Assert
        assert updated.total == Decimal("55")
        assert updated.paid_amount == Decimal("100")
        assert updated.balance == Decimal("-45")
        assert updated.status == InvoiceStatus.PAID

    async def test_raising_total_on_paid_invoice_reopens_it(self, store):
        # Arrange
        invoice = await store.invoices.create(invoice_data(status=InvoiceStatus.SENT))
        await store.invoices.mark_paid(invoice.id)

        # Act
        updated = await store.invoices.update(
            invoice.id,
            InvoiceUpdate(line_items=[LineItemInput(description="Audit", quantity=Decimal("4"), rate=Decimal("100"))]),
        )

        # Assert
        assert updated.total == Decimal("440")
        assert updated.paid_amount == Decimal("137.5")
        assert updated.balance == Decimal("302.5")
        assert updated.status == InvoiceStatus.SENT
        assert (await store.invoices.get(invoice.id)).status == InvoiceStatus.SENT

    async def test_mark_paid(self, store):
        invoice = await store.invoices.create(invoice_data(status=InvoiceStatus.SENT))

        paid = await store.invoices.mark_paid(invoice.id)

        assert paid.status == InvoiceStatus.PAID
        assert paid.paid_amount == Decimal("137.5")
        assert paid.balance == Decimal("0")

    async def test_delete_removes_invoice_and_line_items(self, store, fake_client):
        keep = await store.invoices.create(invoice_data())
        drop = await store.invoices.create(invoice_data())

        assert await store.invoices.delete(drop.id) is True

        assert [row[0] for row in fake_client.data_rows(INVOICES)] == [keep.id]
        assert {row[1] for row in fake_client.data_rows(LINE_ITEMS)} == {keep.id}
        assert await store.invoices.get(drop.id) is None

    async def test_delete_failure_reports_completed_steps(self, store, fake_client):
        # Arrange: line items go, then the invoice row delete fails permanently
        invoice = await store.invoices.create(invoice_data())
        original = fake_client.batch_update
        calls = []

        async def flaky(requests):
            calls.append(requests)
            if len(calls) == 2:
                raise http_error(400, "Invalid requests[0].deleteDimension")
            return await original(requests)

        fake_client.batch_update = flaky

        # Act
        with pytest.raises(CascadeError) as exc_info:
            await store.invoices.delete(invoice.id)

        # Assert
        assert exc_info.value.completed_steps == ["delete_line_items"]
        assert exc_info.value.failed_step == "delete_invoice"
        assert fake_client.data_rows(LINE_ITEMS) == []
        assert await store.invoices.get(invoice.id) is not None

    async def test_apply_payments_derives_status(self, store):
        invoice = await store.invoices.create(invoice_data(status=InvoiceStatus.SENT))

        partial = await store.invoices.apply_payments(invoice.id, Decimal("50"))
        full = await store.invoices.apply_payments(invoice.id, Decimal("137.5"))

        assert partial.status == InvoiceStatus.SENT
        assert partial.balance == Decimal("87.5")
        assert full.status == InvoiceStatus.PAID
        assert await store.invoices.apply_payments("missing", Decimal("1")) is None


@pytest.mark.asyncio
class TestRecurringInvoices:
    """Recurring templates, due detection and generation"""

    async def test_due_detection(self, store, now):
        # Arrange
        due = await store.invoices.create(
            invoice_data(is_recurring=True, recurring_schedule=monthly_schedule(now - timedelta(days=1)))
        )
        await store.invoices.create(
            invoice_data(is_recurring=True, recurring_schedule=monthly_schedule(now + timedelta(days=1)))
        )
        await store.invoices.create(
            invoice_data(
                is_recurring=True,
                recurring_schedule=monthly_schedule(now - timedelta(days=1), is_active=False),
            )
        )
        await store.invoices.create(
            invoice_data(
                is_recurring=True,
                recurring_schedule=monthly_schedule(now - timedelta(days=1), end_date=now - timedelta(hours=1)),
            )
        )
        await store.invoices.create(invoice_data())

        # Act
        recurring = await store.invoices.get_recurring_invoices()
        due_now = await store.invoices.get_recurring_invoices_due()

        # Assert
        assert len(recurring) == 4
        assert [invoice.id for invoice in due_now] == [due.id]

    async def test_generate_creates_draft_copy_and_advances_schedule(self, store, now):
        # Arrange
        template = await store.invoices.create(
            invoice_data(
                status=InvoiceStatus.SENT,
                notes="Monthly retainer",
                is_recurring=True,
                recurring_schedule=monthly_schedule(datetime(2024, 1, 15, tzinfo=timezone.utc)),
            )
        )

        # Act
        generated = await store.invoices.generate_recurring_invoice(template)

        # Assert
        assert generated.id != template.id
        assert generated.status == InvoiceStatus.DRAFT
        assert generated.is_recurring is False
        assert generated.recurring_schedule is None
        assert generated.total == template.total
        assert generated.notes == "Monthly retainer"
        assert generated.issue_date == now
        assert generated.due_date == now + timedelta(days=30)
        assert generated.invoice_number == "INV-2024-0002"

        refreshed = await store.invoices.get(template.id)
        assert refreshed.recurring_schedule.next_invoice_date == datetime(2024, 2, 15, tzinfo=timezone.utc)
        assert len(refreshed.line_items) == 2

    async def test_generate_rejects_non_recurring(self, store):
        invoice = await store.invoices.create(invoice_data())

        with pytest.raises(ValidationError):
            await store.invoices.generate_recurring_invoice(invoice)

    async def test_toggle_flips_active_flag(self, store, now):
        template = await store.invoices.create(
            invoice_data(is_recurring=True, recurring_schedule=monthly_schedule(now))
        )
        plain = await store.invoices.create(invoice_data())

        paused = await store.invoices.toggle_recurring_invoice(template.id)
        resumed = await store.invoices.toggle_recurring_invoice(template.id)

        assert paused.recurring_schedule.is_active is False
        assert resumed.recurring_schedule.is_active is True
        assert await store.invoices.toggle_recurring_invoice(plain.id) is None
        assert await store.invoices.toggle_recurring_invoice("missing") is None
