"""Recurring Invoice Background Worker

Generates the next invoice for every due recurring invoice.
Can be run as a standalone script or integrated with a scheduler.
"""

import asyncio
import logging
from datetime import datetime
from typing import Optional

from config import ApplicationConfig
from src.adapter.repositories.store import SheetsStore
from src.app.services.activity_logger import ActivityLogger
from src.app.use_cases.billing import ProcessRecurringInvoices, RecurringInvoiceRunDTO

logger = logging.getLogger(__name__)


class RecurringInvoiceWorker:
    """
    Background worker for recurring invoice generation

    Features:
    - Finds recurring invoices whose next_invoice_date has passed
    - Generates a draft invoice for each and advances the schedule
    - A failure on one invoice is counted and does not stop the run
    - Can run once or continuously

    Usage:
        # Run once (typical cron usage)
        worker = RecurringInvoiceWorker()
        result = await worker.run_once()

        # Run continuously (checks every RECURRING_CHECK_INTERVAL_SECONDS)
        worker = RecurringInvoiceWorker()
        await worker.run_forever()
    """

    def __init__(self, store: Optional[SheetsStore] = None):
        """
        Initialize the worker

        Args:
            store: Sheets store (defaults to one built from ApplicationConfig)
        """
        self.store = store or SheetsStore.from_config(ApplicationConfig)
        logger.info("RecurringInvoiceWorker initialized")

    async def run_once(self, now: Optional[datetime] = None) -> RecurringInvoiceRunDTO:
        """
        Run generation once

        Args:
            now: Reference time for the due check (defaults to current UTC time)

        Returns:
            RecurringInvoiceRunDTO with summary

        Raises:
            RuntimeError: When the due invoices could not be loaded
        """
        await self.store.initialize()

        use_case = ProcessRecurringInvoices(
            invoice_repo=self.store.invoices,
            activity_logger=ActivityLogger(self.store.activity_logs, user_id="system"),
        )
        result = await use_case.execute(now)

        if result.is_err():
            raise RuntimeError(f"{result.error.message}: {result.error.reason}")

        return result.value

    async def run_forever(self, check_interval_seconds: Optional[int] = None):
        """
        Run generation continuously

        Args:
            check_interval_seconds: Seconds between runs
                (default: RECURRING_CHECK_INTERVAL_SECONDS)
        """
        interval = check_interval_seconds or ApplicationConfig.RECURRING_CHECK_INTERVAL_SECONDS
        logger.info(f"Starting continuous recurring invoice generation with {interval}s interval")

        while True:
            try:
                result = await self.run_once()
                if result.total_due:
                    logger.info(
                        f"Recurring cycle: {result.generated} generated, {result.failed} failed"
                    )
                else:
                    logger.debug("No recurring invoices due")
            except Exception as e:
                logger.error(f"Recurring invoice cycle failed: {e}")

            await asyncio.sleep(interval)

    async def shutdown(self):
        """Cleanup resources"""
        await self.store.close()
        logger.info("RecurringInvoiceWorker shutdown complete")


async def main():
    """
    Entry point for running the worker as a standalone script

    Usage:
        # Run once
        python -m src.worker.recurring_invoices

        # Run continuously
        python -m src.worker.recurring_invoices --continuous
    """
    import argparse

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Recurring Invoice Worker")
    parser.add_argument(
        "--continuous", action="store_true", help="Run continuously"
    )
    parser.add_argument(
        "--interval", type=int, help="Seconds between runs in continuous mode"
    )
    args = parser.parse_args()

    worker = RecurringInvoiceWorker()

    try:
        if args.continuous:
            await worker.run_forever(args.interval)
        else:
            result = await worker.run_once()
            print(f"Recurring invoice run complete:")
            print(f"  Due: {result.total_due}")
            print(f"  Generated: {result.generated}")
            print(f"  Failed: {result.failed}")
            print(f"  Execution time: {result.execution_time_ms}ms")
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
