"""Background workers for the invoicing service"""
from .recurring_invoices import RecurringInvoiceWorker

__all__ = ["RecurringInvoiceWorker"]
