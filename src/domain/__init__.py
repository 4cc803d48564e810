from .base import BaseModel, generate_id, utcnow
from .client import Address, Client, ClientCreate, ClientUpdate
from .invoice import (
    Invoice,
    InvoiceCreate,
    InvoiceStatus,
    InvoiceUpdate,
    LineItem,
    LineItemInput,
)
from .recurring import RecurringFrequency, RecurringSchedule, calculate_next_invoice_date
from .payment import Payment, PaymentCreate, PaymentMethod, PaymentUpdate
from .template import Template, TemplateCreate, TemplateUpdate
from .project import Project, ProjectCreate, ProjectStatus, ProjectUpdate
from .task import Task, TaskCreate, TaskPriority, TaskStatus, TaskUpdate
from .time_entry import TimeEntry, TimeEntryCreate, TimeEntryUpdate
from .activity_log import ActivityLog, ActivityLogCreate, ActivityLogFilters, ActivityLogPage
from .settings import CompanySettings

__all__ = [
    "BaseModel",
    "generate_id",
    "utcnow",
    "Address",
    "Client",
    "ClientCreate",
    "ClientUpdate",
    "Invoice",
    "InvoiceCreate",
    "InvoiceStatus",
    "InvoiceUpdate",
    "LineItem",
    "LineItemInput",
    "RecurringFrequency",
    "RecurringSchedule",
    "calculate_next_invoice_date",
    "Payment",
    "PaymentCreate",
    "PaymentMethod",
    "PaymentUpdate",
    "Template",
    "TemplateCreate",
    "TemplateUpdate",
    "Project",
    "ProjectCreate",
    "ProjectStatus",
    "ProjectUpdate",
    "Task",
    "TaskCreate",
    "TaskPriority",
    "TaskStatus",
    "TaskUpdate",
    "TimeEntry",
    "TimeEntryCreate",
    "TimeEntryUpdate",
    "ActivityLog",
    "ActivityLogCreate",
    "ActivityLogFilters",
    "ActivityLogPage",
    "CompanySettings",
]
