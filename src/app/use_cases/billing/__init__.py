"""Billing domain use cases"""
from .create_invoice import CreateInvoice
from .record_payment import RecordPayment
from .process_recurring_invoices import ProcessRecurringInvoices
from .dtos import (
    PaymentRecordedDTO,
    RecurringInvoiceFailureDTO,
    RecurringInvoiceRunDTO,
)

__all__ = [
    "CreateInvoice",
    "RecordPayment",
    "ProcessRecurringInvoices",
    "PaymentRecordedDTO",
    "RecurringInvoiceFailureDTO",
    "RecurringInvoiceRunDTO",
]
