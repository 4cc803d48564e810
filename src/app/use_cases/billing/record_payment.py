"""RecordPayment Use Case

Records a payment against an invoice. The payment store recomputes the
invoice's paid amount, balance and status.
"""

from libs.result import Error, Result, Return
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.repositories.payment_repository import PaymentRepository
from src.app.services.activity_logger import ActivityLogger, ActivityType
from src.domain.invoice import InvoiceStatus
from src.domain.payment import PaymentCreate
from .dtos import PaymentRecordedDTO


class RecordPayment:
    """
    Use Case: Record a payment

    Business Rules:
    1. The invoice must exist and must not be cancelled
    2. amount > 0 (enforced by PaymentCreate)
    3. balance <= 0 after the payment => invoice is paid
    4. Activity logging never fails the operation
    """

    def __init__(
        self,
        invoice_repo: InvoiceRepository,
        payment_repo: PaymentRepository,
        activity_logger: ActivityLogger,
    ):
        self.invoice_repo = invoice_repo
        self.payment_repo = payment_repo
        self.activity_logger = activity_logger

    async def execute(self, command: PaymentCreate) -> Result[PaymentRecordedDTO]:
        try:
            invoice = await self.invoice_repo.get(command.invoice_id)
            if invoice is None:
                return Return.err(
                    Error(
                        code="INVOICE_NOT_FOUND",
                        message=f"Invoice {command.invoice_id} not found",
                    )
                )
            if invoice.status == InvoiceStatus.CANCELLED:
                return Return.err(
                    Error(
                        code="INVOICE_CANCELLED",
                        message=f"Invoice {invoice.invoice_number} is cancelled",
                        reason="Payments cannot be recorded against cancelled invoices",
                    )
                )

            payment = await self.payment_repo.create(command)
            updated = await self.invoice_repo.get(command.invoice_id)

            await self.activity_logger.log_payment_activity(
                ActivityType.PAYMENT_RECEIVED, payment, invoice.invoice_number
            )
            if updated is not None and updated.status == InvoiceStatus.PAID and invoice.status != InvoiceStatus.PAID:
                await self.activity_logger.log_invoice_activity(ActivityType.INVOICE_PAID, updated)

            return Return.ok(PaymentRecordedDTO(payment=payment, invoice=updated))

        except Exception as e:
            return Return.err(
                Error(
                    code="RECORD_PAYMENT_FAILED",
                    message="Failed to record payment",
                    reason=str(e),
                    retryable=getattr(e, "retryable", False),
                )
            )
