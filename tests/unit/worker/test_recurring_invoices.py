"""Unit tests for RecurringInvoiceWorker

Tests cover:
- run_once over an in-memory spreadsheet
- Lookup failures raised as RuntimeError
- run_forever keeps going after a failed cycle
- Shutdown closes the store
"""

import asyncio
import pytest
from datetime import datetime, timezone
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

from src.app.errors import AuthenticationError
from src.domain.invoice import InvoiceCreate, LineItemInput
from src.domain.recurring import RecurringFrequency, RecurringSchedule
from src.worker.recurring_invoices import RecurringInvoiceWorker
from src.app.use_cases.billing.dtos import RecurringInvoiceRunDTO


@pytest.mark.asyncio
class TestRecurringInvoiceWorkerRunOnce:

    async def test_run_once_generates_due_invoices(self, store, now):
        """
        Given: One active monthly recurring invoice due on 2024-01-15
        When: run_once is called on 2024-03-01
        Then: One draft is generated, the schedule advances, activity is logged as system
        """
        # Arrange
        template = await store.invoices.create(
            InvoiceCreate(
                client_id="client_1",
                line_items=[LineItemInput(description="Retainer", quantity=Decimal("1"), rate=Decimal("500"))],
                is_recurring=True,
                recurring_schedule=RecurringSchedule(
                    frequency=RecurringFrequency.MONTHLY,
                    start_date=datetime(2024, 1, 15, tzinfo=timezone.utc),
                    next_invoice_date=datetime(2024, 1, 15, tzinfo=timezone.utc),
                ),
            )
        )
        worker = RecurringInvoiceWorker(store=store)

        # Act
        result = await worker.run_once(now)

        # Assert
        assert (result.total_due, result.generated, result.failed) == (1, 1, 0)
        generated = await store.invoices.get(result.generated_invoice_ids[0])
        assert generated.total == Decimal("500")
        assert generated.is_recurring is False
        refreshed = await store.invoices.get(template.id)
        assert refreshed.recurring_schedule.next_invoice_date == datetime(2024, 2, 15, tzinfo=timezone.utc)
        logs = await store.activity_logs.list()
        assert [(log.type, log.user_id) for log in logs] == [("invoice_created", "system")]

    async def test_run_once_with_nothing_due(self, store, now):
        worker = RecurringInvoiceWorker(store=store)

        result = await worker.run_once(now)

        assert result.total_due == 0

    async def test_lookup_failure_raises(self):
        # Arrange
        store = MagicMock()
        store.initialize = AsyncMock()
        store.invoices.get_recurring_invoices_due = AsyncMock(
            side_effect=AuthenticationError("Unauthorized", "read_Invoices", 401)
        )
        worker = RecurringInvoiceWorker(store=store)

        # Act / Assert
        with pytest.raises(RuntimeError, match="Failed to load recurring invoices"):
            await worker.run_once()


@pytest.mark.asyncio
class TestRecurringInvoiceWorkerRunForever:

    @patch("src.worker.recurring_invoices.asyncio.sleep")
    async def test_run_forever_survives_failed_cycle(self, mock_sleep):
        """
        Given: The first cycle fails and the second succeeds
        When: run_forever is called
        Then: Both cycles run with the configured pause in between
        """
        # Arrange
        worker = RecurringInvoiceWorker(store=MagicMock())
        summary = RecurringInvoiceRunDTO(
            total_due=0, generated=0, failed=0, run_at=datetime(2024, 3, 1, tzinfo=timezone.utc)
        )
        worker.run_once = AsyncMock(side_effect=[RuntimeError("boom"), summary])
        mock_sleep.side_effect = [None, asyncio.CancelledError()]

        # Act
        with pytest.raises(asyncio.CancelledError):
            await worker.run_forever(check_interval_seconds=5)

        # Assert
        assert worker.run_once.await_count == 2
        mock_sleep.assert_awaited_with(5)

    async def test_shutdown_closes_store(self):
        store = MagicMock()
        store.close = AsyncMock()
        worker = RecurringInvoiceWorker(store=store)

        await worker.shutdown()

        store.close.assert_awaited_once()
