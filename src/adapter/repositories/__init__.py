from .sheets_client_repository import SheetsClientRepository
from .sheets_invoice_repository import SheetsInvoiceRepository
from .sheets_payment_repository import SheetsPaymentRepository
from .sheets_template_repository import SheetsTemplateRepository
from .sheets_project_repository import SheetsProjectRepository
from .sheets_task_repository import SheetsTaskRepository
from .sheets_time_entry_repository import SheetsTimeEntryRepository
from .sheets_activity_log_repository import SheetsActivityLogRepository
from .sheets_settings_repository import SheetsSettingsRepository
from .store import SheetsStore

__all__ = [
    "SheetsClientRepository",
    "SheetsInvoiceRepository",
    "SheetsPaymentRepository",
    "SheetsTemplateRepository",
    "SheetsProjectRepository",
    "SheetsTaskRepository",
    "SheetsTimeEntryRepository",
    "SheetsActivityLogRepository",
    "SheetsSettingsRepository",
    "SheetsStore",
]
