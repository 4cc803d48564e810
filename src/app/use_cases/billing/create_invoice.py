"""CreateInvoice Use Case

Creates an invoice for an existing client and records the activity.
"""

from libs.result import Error, Result, Return
from src.app.repositories.client_repository import ClientRepository
from src.app.repositories.invoice_repository import InvoiceRepository
from src.app.services.activity_logger import ActivityLogger, ActivityType
from src.domain.invoice import Invoice, InvoiceCreate


class CreateInvoice:
    """
    Use Case: Create an invoice

    Business Rules:
    1. The client must exist
    2. Invoice number is auto-generated (<PREFIX>-YYYY-NNNN)
    3. Totals are computed from line items and tax rate
    4. Activity logging never fails the operation

    Flow:
    1. Look up the client
    2. Create the invoice (number, totals, line items)
    3. Record invoice_created
    4. Return the invoice
    """

    def __init__(
        self,
        client_repo: ClientRepository,
        invoice_repo: InvoiceRepository,
        activity_logger: ActivityLogger,
    ):
        self.client_repo = client_repo
        self.invoice_repo = invoice_repo
        self.activity_logger = activity_logger

    async def execute(self, command: InvoiceCreate) -> Result[Invoice]:
        """
        Execute invoice creation

        Args:
            command: InvoiceCreate with client_id, line items and tax rate

        Returns:
            Result[Invoice]: Success with the created invoice or error
        """
        try:
            client = await self.client_repo.get(command.client_id)
            if client is None:
                return Return.err(
                    Error(
                        code="CLIENT_NOT_FOUND",
                        message=f"Client {command.client_id} not found",
                    )
                )

            invoice = await self.invoice_repo.create(command)

            await self.activity_logger.log_invoice_activity(
                ActivityType.INVOICE_CREATED,
                invoice,
                metadata={"client_id": client.id, "client_name": client.name},
            )

            return Return.ok(invoice)

        except Exception as e:
            return Return.err(
                Error(
                    code="CREATE_INVOICE_FAILED",
                    message="Failed to create invoice",
                    reason=str(e),
                    retryable=getattr(e, "retryable", False),
                )
            )
