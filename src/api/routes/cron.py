"""Cron API Routes

Entry points for an external scheduler.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Header, status

from config import ApplicationConfig
from libs.result import Error
from src.adapter.repositories.store import SheetsStore
from src.api.error import ClientError
from src.app.services.activity_logger import ActivityLogger
from src.app.use_cases.billing import ProcessRecurringInvoices, RecurringInvoiceRunDTO
from src.depends import get_store

router = APIRouter(prefix="/cron", tags=["Cron"])


def verify_cron_secret(authorization: Optional[str] = Header(default=None)) -> None:
    secret = ApplicationConfig.CRON_SECRET
    if secret and authorization != f"Bearer {secret}":
        raise ClientError(
            Error(code="UNAUTHORIZED", message="Invalid cron secret"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )


@router.post(
    "/recurring-invoices",
    response_model=RecurringInvoiceRunDTO,
    dependencies=[Depends(verify_cron_secret)],
)
async def process_recurring_invoices(store: SheetsStore = Depends(get_store)):
    """
    Generate every due recurring invoice.

    When `CRON_SECRET` is configured the request must carry
    `Authorization: Bearer <CRON_SECRET>`.
    """
    use_case = ProcessRecurringInvoices(
        invoice_repo=store.invoices,
        activity_logger=ActivityLogger(store.activity_logs, user_id="system"),
    )
    result = await use_case.execute()

    if result.is_err():
        status_code = status.HTTP_503_SERVICE_UNAVAILABLE if result.error.retryable else status.HTTP_500_INTERNAL_SERVER_ERROR
        raise ClientError(result.error, status_code=status_code)

    return result.value
