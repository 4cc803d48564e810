"""Unit tests for Invoice domain entity"""

import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from src.domain.invoice import Invoice, InvoiceStatus, LineItem
from src.domain.recurring import RecurringSchedule

NOW = datetime(2024, 3, 1, tzinfo=timezone.utc)


def make_invoice(**overrides) -> Invoice:
    values = dict(
        invoice_number="INV-2024-0001",
        client_id="client_1",
        status=InvoiceStatus.SENT,
        due_date=NOW + timedelta(days=30),
        line_items=[
            LineItem(description="Design", quantity=Decimal("2"), rate=Decimal("50")),
            LineItem(description="Hosting", quantity=Decimal("1"), rate=Decimal("25")),
        ],
        tax_rate=Decimal("10"),
    )
    values.update(overrides)
    return Invoice(**values).recalculate_totals()


class TestInvoiceTotals:

    def test_recalculate_totals(self):
        invoice = make_invoice()

        assert [item.amount for item in invoice.line_items] == [Decimal("100"), Decimal("25")]
        assert invoice.subtotal == Decimal("125")
        assert invoice.tax_amount == Decimal("12.5")
        assert invoice.total == Decimal("137.5")
        assert invoice.balance == Decimal("137.5")

    def test_empty_invoice_totals_are_zero(self):
        invoice = make_invoice(line_items=[])

        assert invoice.total == Decimal("0")
        assert invoice.balance == Decimal("0")

    def test_schema_example_merges_with_base_config(self):
        assert Invoice.model_config["populate_by_name"] is True
        assert Invoice.model_json_schema()["example"]["invoice_number"] == "INV-2024-0001"

    def test_naive_datetimes_are_stored_as_utc(self):
        invoice = Invoice(issue_date=datetime(2024, 1, 1, 9, 0))

        assert invoice.issue_date.tzinfo == timezone.utc


class TestApplyPayments:
    """Status derivation from the sum of payments"""

    def test_full_payment_marks_paid(self):
        invoice = make_invoice().apply_payments(Decimal("137.5"), NOW)

        assert invoice.status == InvoiceStatus.PAID
        assert invoice.balance == Decimal("0")

    def test_overpayment_is_paid(self):
        invoice = make_invoice().apply_payments(Decimal("200"), NOW)

        assert invoice.status == InvoiceStatus.PAID
        assert invoice.balance == Decimal("-62.5")

    def test_partial_payment_on_draft_moves_to_sent(self):
        invoice = make_invoice(status=InvoiceStatus.DRAFT).apply_payments(Decimal("10"), NOW)

        assert invoice.status == InvoiceStatus.SENT

    def test_partial_payment_past_due_is_overdue(self):
        invoice = make_invoice(due_date=NOW - timedelta(days=1)).apply_payments(Decimal("10"), NOW)

        assert invoice.status == InvoiceStatus.OVERDUE

    def test_paid_invoice_reopens_when_payments_drop(self):
        invoice = make_invoice(status=InvoiceStatus.PAID).apply_payments(Decimal("0"), NOW)

        assert invoice.status == InvoiceStatus.SENT
        assert invoice.balance == Decimal("137.5")

    def test_cancelled_invoice_keeps_status(self):
        invoice = make_invoice(status=InvoiceStatus.CANCELLED).apply_payments(Decimal("137.5"), NOW)

        assert invoice.status == InvoiceStatus.CANCELLED
        assert invoice.paid_amount == Decimal("137.5")

    def test_mark_paid(self):
        invoice = make_invoice().mark_paid()

        assert (invoice.status, invoice.paid_amount, invoice.balance) == (
            InvoiceStatus.PAID, Decimal("137.5"), Decimal("0")
        )


class TestRecurringDue:

    @pytest.mark.parametrize(
        "next_offset, end_offset, active, expected",
        [
            (timedelta(days=-1), None, True, True),
            (timedelta(0), None, True, True),
            (timedelta(days=1), None, True, False),
            (timedelta(days=-1), None, False, False),
            (timedelta(days=-1), timedelta(days=1), True, True),
            (timedelta(days=-1), timedelta(0), True, False),
        ],
    )
    def test_is_recurring_due(self, next_offset, end_offset, active, expected):
        schedule = RecurringSchedule(
            start_date=NOW - timedelta(days=60),
            next_invoice_date=NOW + next_offset,
            end_date=NOW + end_offset if end_offset is not None else None,
            is_active=active,
        )
        invoice = make_invoice(is_recurring=True, recurring_schedule=schedule)

        assert invoice.is_recurring_due(NOW) is expected

    def test_non_recurring_is_never_due(self):
        schedule = RecurringSchedule(start_date=NOW, next_invoice_date=NOW - timedelta(days=1))

        assert make_invoice(recurring_schedule=schedule).is_recurring_due(NOW) is False
