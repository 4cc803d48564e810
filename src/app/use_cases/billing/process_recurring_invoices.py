"""ProcessRecurringInvoices Use Case

Generates the next invoice for every recurring invoice that is due.
Used by the recurring invoice worker and the cron endpoint.
"""

import logging
import time
from datetime import datetime
from typing import Optional

from libs.result import Error, Result, Return
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.services.activity_logger import ActivityLogger, ActivityType
from src.domain.base import utcnow
from .dtos import RecurringInvoiceFailureDTO, RecurringInvoiceRunDTO

logger = logging.getLogger(__name__)


class ProcessRecurringInvoices:
    """
    Use Case: Generate due recurring invoices

    Business Rules:
    1. Due = recurring, schedule active, next_invoice_date <= now and
       (no end_date or end_date > now)
    2. Each generated invoice is a non-recurring draft
    3. The recurring invoice's next_invoice_date advances after generation
    4. One failing invoice does not stop the others

    Flow:
    1. Load due recurring invoices
    2. Generate one invoice per due recurring invoice
    3. Count successes and failures
    4. Return the run summary
    """

    def __init__(
        self,
        invoice_repo: InvoiceRepository,
        activity_logger: Optional[ActivityLogger] = None,
    ):
        self.invoice_repo = invoice_repo
        self.activity_logger = activity_logger

    async def execute(self, now: Optional[datetime] = None) -> Result[RecurringInvoiceRunDTO]:
        """
        Execute one generation run

        Args:
            now: Reference time for the due check (defaults to current UTC time)

        Returns:
            Result[RecurringInvoiceRunDTO]: Run summary, or error if the due
            invoices could not be loaded
        """
        start_time = time.time()
        now = now or utcnow()

        try:
            due = await self.invoice_repo.get_recurring_invoices_due(now)
        except Exception as e:
            return Return.err(
                Error(
                    code="RECURRING_LOOKUP_FAILED",
                    message="Failed to load recurring invoices",
                    reason=str(e),
                    retryable=getattr(e, "retryable", False),
                )
            )

        logger.info(f"Found {len(due)} recurring invoice(s) due at {now.isoformat()}")

        generated_ids = []
        failures = []
        for template_invoice in due:
            try:
                generated = await self.invoice_repo.generate_recurring_invoice(template_invoice)
            except Exception as e:
                logger.error(
                    f"Failed to generate invoice from recurring {template_invoice.invoice_number}: {e}"
                )
                failures.append(
                    RecurringInvoiceFailureDTO(
                        invoice_id=template_invoice.id,
                        invoice_number=template_invoice.invoice_number,
                        reason=str(e),
                    )
                )
                continue

            generated_ids.append(generated.id)
            if self.activity_logger is not None:
                await self.activity_logger.log_invoice_activity(
                    ActivityType.INVOICE_CREATED,
                    generated,
                    metadata={"recurring_invoice_id": template_invoice.id},
                )

        result = RecurringInvoiceRunDTO(
            total_due=len(due),
            generated=len(generated_ids),
            failed=len(failures),
            generated_invoice_ids=generated_ids,
            failures=failures,
            run_at=now,
            execution_time_ms=int((time.time() - start_time) * 1000),
        )

        logger.info(
            f"Recurring invoice run complete: {result.generated}/{result.total_due} generated, "
            f"{result.failed} failed, {result.execution_time_ms}ms"
        )
        return Return.ok(result)
