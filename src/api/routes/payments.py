"""Payment API Routes"""

from typing import List, Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import Response

from src.adapter.repositories.store import SheetsStore
from src.api.error import ClientError, not_found
from src.app.services.activity_logger import ActivityLogger, ActivityType
from src.app.use_cases.billing import PaymentRecordedDTO, RecordPayment
from src.depends import get_activity_logger, get_store
from src.domain.payment import Payment, PaymentCreate, PaymentUpdate

router = APIRouter(prefix="/payments", tags=["Payments"])


@router.get("", response_model=List[Payment])
async def list_payments(invoice_id: Optional[str] = None, store: SheetsStore = Depends(get_store)):
    if invoice_id:
        return await store.payments.list_by_invoice(invoice_id)
    return await store.payments.list()


@router.get("/{payment_id}", response_model=Payment)
async def get_payment(payment_id: str, store: SheetsStore = Depends(get_store)):
    payment = await store.payments.get(payment_id)
    if payment is None:
        raise not_found("payment", payment_id)
    return payment


@router.post(
    "",
    response_model=PaymentRecordedDTO,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {
            "description": "Invoice not found",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INVOICE_NOT_FOUND",
                            "message": "Invoice 18c2f9a1b3e4d5f6a7 not found",
                            "retryable": False,
                        }
                    }
                }
            }
        },
        400: {
            "description": "Invoice is cancelled",
            "content": {
                "application/json": {
                    "example": {
                        "error": {
                            "code": "INVOICE_CANCELLED",
                            "message": "Invoice INV-2024-0001 is cancelled",
                            "retryable": False,
                        }
                    }
                }
            }
        }
    }
)
async def record_payment(
    request: PaymentCreate,
    store: SheetsStore = Depends(get_store),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    """
    Record a payment against an invoice.

    The invoice's paid amount and balance are recomputed from all of its
    payments; a zero or negative balance marks it paid.

    **Returns:**
    - 201: Payment recorded (with the updated invoice)
    - 400: Invoice is cancelled
    - 404: Invoice not found
    """
    use_case = RecordPayment(store.invoices, store.payments, activity)
    result = await use_case.execute(request)

    if result.is_err():
        if result.error.code == "INVOICE_NOT_FOUND":
            raise ClientError(result.error, status_code=status.HTTP_404_NOT_FOUND)
        if result.error.retryable:
            raise ClientError(result.error, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)
        raise ClientError(result.error)

    return result.value


@router.put("/{payment_id}", response_model=Payment)
async def update_payment(
    payment_id: str,
    request: PaymentUpdate,
    store: SheetsStore = Depends(get_store),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    payment = await store.payments.update(payment_id, request)
    if payment is None:
        raise not_found("payment", payment_id)
    await activity.log_payment_activity(ActivityType.PAYMENT_UPDATED, payment)
    return payment


@router.delete("/{payment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_payment(
    payment_id: str,
    store: SheetsStore = Depends(get_store),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    payment = await store.payments.get(payment_id)
    if payment is None or not await store.payments.delete(payment_id):
        raise not_found("payment", payment_id)
    await activity.log_payment_activity(ActivityType.PAYMENT_DELETED, payment)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
