"""Invoice API Routes

FastAPI routes for invoices, including payment shortcuts and the recurring
invoice schedule.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import Response

from libs.result import Error
from src.adapter.repositories.store import SheetsStore
from src.api.error import ClientError, not_found
from src.app.services.activity_logger import ActivityLogger, ActivityType
from src.app.use_cases.billing import CreateInvoice
from src.depends import get_activity_logger, get_store
from src.domain.invoice import Invoice, InvoiceCreate, InvoiceStatus, InvoiceUpdate
from src.domain.payment import Payment

router = APIRouter(prefix="/invoices", tags=["Invoices"])

STATUS_ACTIVITY = {
    InvoiceStatus.SENT: ActivityType.INVOICE_SENT,
    InvoiceStatus.PAID: ActivityType.INVOICE_PAID,
    InvoiceStatus.CANCELLED: ActivityType.INVOICE_CANCELLED,
}


@router.get("", response_model=List[Invoice])
async def list_invoices(
    status_filter: Optional[InvoiceStatus] = Query(default=None, alias="status"),
    client_id: Optional[str] = None,
    store: SheetsStore = Depends(get_store),
):
    """
    List invoices.

    **Query parameters:**
    - `status` (optional): Only invoices in this status
    - `client_id` (optional): Only invoices of this client
    """
    if client_id:
        invoices = await store.invoices.list_by_client(client_id)
        if status_filter:
            invoices = [invoice for invoice in invoices if invoice.status == status_filter]
        return invoices
    if status_filter:
        return await store.invoices.list_by_status(status_filter)
    return await store.invoices.list()


@router.get("/recurring", response_model=List[Invoice])
async def list_recurring_invoices(store: SheetsStore = Depends(get_store)):
    return await store.invoices.get_recurring_invoices()


@router.get("/recurring/due", response_model=List[Invoice])
async def list_due_recurring_invoices(store: SheetsStore = Depends(get_store)):
    return await store.invoices.get_recurring_invoices_due()


@router.get("/{invoice_id}", response_model=Invoice)
async def get_invoice(invoice_id: str, store: SheetsStore = Depends(get_store)):
    invoice = await store.invoices.get(invoice_id)
    if invoice is None:
        raise not_found("invoice", invoice_id)
    return invoice


@router.get("/{invoice_id}/payments", response_model=List[Payment])
async def list_invoice_payments(invoice_id: str, store: SheetsStore = Depends(get_store)):
    return await store.payments.list_by_invoice(invoice_id)


@router.post(
    "",
    response_model=Invoice,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {
            "description": "Client not found",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "CLIENT_NOT_FOUND",
                            "message": "Client 18c2f9a0aa01b2c3d4 not found",
                            "retryable": False,
                        }
                    }
                }
            }
        }
    }
)
async def create_invoice(
    request: InvoiceCreate,
    store: SheetsStore = Depends(get_store),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    """
    Create an invoice.

    The invoice number is generated (`<PREFIX>-YYYY-NNNN`) and subtotal, tax,
    total and balance are computed from the line items.

    **Returns:**
    - 201: Invoice created
    - 404: Client not found
    """
    use_case = CreateInvoice(store.clients, store.invoices, activity)
    result = await use_case.execute(request)

    if result.is_err():
        if result.error.code == "CLIENT_NOT_FOUND":
            raise ClientError(result.error, status_code=status.HTTP_404_NOT_FOUND)
        if result.error.retryable:
            raise ClientError(result.error, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
        raise ClientError(result.error)

    return result.value


@router.put("/{invoice_id}", response_model=Invoice)
async def update_invoice(
    invoice_id: str,
    request: InvoiceUpdate,
    store: SheetsStore = Depends(get_store),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    previous = await store.invoices.get(invoice_id)
    if previous is None:
        raise not_found("invoice", invoice_id)

    invoice = await store.invoices.update(invoice_id, request)
    if invoice is None:
        raise not_found("invoice", invoice_id)

    activity_type = ActivityType.INVOICE_UPDATED
    if invoice.status != previous.status:
        activity_type = STATUS_ACTIVITY.get(invoice.status, ActivityType.INVOICE_UPDATED)
    await activity.log_invoice_activity(
        activity_type,
        invoice,
        previous_value=previous.status.value,
        new_value=invoice.status.value,
    )
    return invoice


@router.delete("/{invoice_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_invoice(
    invoice_id: str,
    store: SheetsStore = Depends(get_store),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    invoice = await store.invoices.get(invoice_id)
    if invoice is None or not await store.invoices.delete(invoice_id):
        raise not_found("invoice", invoice_id)
    await activity.log_invoice_activity(ActivityType.INVOICE_DELETED, invoice)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{invoice_id}/mark-paid", response_model=Invoice)
async def mark_invoice_paid(
    invoice_id: str,
    store: SheetsStore = Depends(get_store),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    invoice = await store.invoices.mark_paid(invoice_id)
    if invoice is None:
        raise not_found("invoice", invoice_id)
    await activity.log_invoice_activity(ActivityType.INVOICE_PAID, invoice)
    return invoice


@router.post("/{invoice_id}/recurring/toggle", response_model=Invoice)
async def toggle_recurring_invoice(
    invoice_id: str,
    store: SheetsStore = Depends(get_store),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    invoice = await store.invoices.toggle_recurring_invoice(invoice_id)
    if invoice is None:
        raise ClientError(
            Error(
                code="RECURRING_INVOICE_NOT_FOUND",
                message=f"Recurring invoice {invoice_id} not found",
            ),
            status_code=status.HTTP_404_NOT_FOUND,
        )
    await activity.log_invoice_activity(
        ActivityType.INVOICE_UPDATED,
        invoice,
        new_value=f"recurring_active={invoice.recurring_schedule.is_active}",
    )
    return invoice


@router.post(
    "/{invoice_id}/recurring/generate",
    response_model=Invoice,
    status_code=status.HTTP_201_CREATED,
)
async def generate_recurring_invoice(
    invoice_id: str,
    store: SheetsStore = Depends(get_store),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    """Generate the next invoice of a recurring series now, regardless of its due date"""
    template_invoice = await store.invoices.get(invoice_id)
    if template_invoice is None or not template_invoice.is_recurring:
        raise ClientError(
            Error(
                code="RECURRING_INVOICE_NOT_FOUND",
                message=f"Recurring invoice {invoice_id} not found",
            ),
            status_code=status.HTTP_404_NOT_FOUND,
        )
    generated = await store.invoices.generate_recurring_invoice(template_invoice)
    await activity.log_invoice_activity(
        ActivityType.INVOICE_CREATED, generated, metadata={"recurring_invoice_id": invoice_id}
    )
    return generated
