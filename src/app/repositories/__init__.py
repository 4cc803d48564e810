from .base import EntityRepository
from .client_repository import ClientRepository
from .invoice_repository import InvoiceRepository
from .payment_repository import PaymentRepository
from .template_repository import TemplateRepository
from .project_repository import ProjectRepository
from .task_repository import TaskRepository
from .time_entry_repository import TimeEntryRepository
from .activity_log_repository import ActivityLogRepository
from .settings_repository import SettingsRepository

__all__ = [
    "EntityRepository",
    "ClientRepository",
    "InvoiceRepository",
    "PaymentRepository",
    "TemplateRepository",
    "ProjectRepository",
    "TaskRepository",
    "TimeEntryRepository",
    "ActivityLogRepository",
    "SettingsRepository",
]
