"""Activity Logger

Convenience layer over the activity log repository. Logging is best
effort: failures are logged and swallowed so a business operation never
fails because its audit entry could not be written.
"""

import logging
from decimal import Decimal
from typing import Any, Dict, Optional

from src.app.repositories.activity_log_repository import ActivityLogRepository
from src.domain.activity_log import ActivityLog, ActivityLogCreate
from src.domain.client import Client
from src.domain.invoice import Invoice
from src.domain.payment import Payment
from src.domain.project import Project
from src.domain.task import Task
from src.domain.template import Template
from src.domain.time_entry import TimeEntry

logger = logging.getLogger(__name__)


class ActivityType:
    CLIENT_ADDED = "client_added"
    CLIENT_UPDATED = "client_updated"
    CLIENT_DELETED = "client_deleted"
    INVOICE_CREATED = "invoice_created"
    INVOICE_UPDATED = "invoice_updated"
    INVOICE_SENT = "invoice_sent"
    INVOICE_PAID = "invoice_paid"
    INVOICE_CANCELLED = "invoice_cancelled"
    INVOICE_DELETED = "invoice_deleted"
    PAYMENT_RECEIVED = "payment_received"
    PAYMENT_UPDATED = "payment_updated"
    PAYMENT_DELETED = "payment_deleted"
    PROJECT_CREATED = "project_created"
    PROJECT_UPDATED = "project_updated"
    PROJECT_DELETED = "project_deleted"
    TASK_CREATED = "task_created"
    TASK_UPDATED = "task_updated"
    TASK_DELETED = "task_deleted"
    TIME_ENTRY_CREATED = "time_entry_created"
    TIME_ENTRY_UPDATED = "time_entry_updated"
    TIME_ENTRY_DELETED = "time_entry_deleted"
    TEMPLATE_CREATED = "template_created"
    TEMPLATE_UPDATED = "template_updated"
    TEMPLATE_DELETED = "template_deleted"
    SETTINGS_UPDATED = "settings_updated"


class ActivityLogger:
    """
    Records business events

    Usage:
        activity = ActivityLogger(store.activity_logs)
        await activity.log_invoice_activity(ActivityType.INVOICE_CREATED, invoice)
    """

    def __init__(
        self,
        repository: ActivityLogRepository,
        user_id: Optional[str] = None,
        user_email: Optional[str] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ):
        self.repository = repository
        self.user_id = user_id
        self.user_email = user_email
        self.ip_address = ip_address
        self.user_agent = user_agent

    async def log(
        self,
        type: str,
        description: str,
        entity_type: str,
        entity_id: str,
        entity_name: str = "",
        amount: Optional[Decimal] = None,
        previous_value: Optional[str] = None,
        new_value: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Optional[ActivityLog]:
        """
        Append one activity entry

        Returns:
            The stored ActivityLog, or None when the write failed
        """
        try:
            return await self.repository.create(
                ActivityLogCreate(
                    type=type,
                    description=description,
                    entity_type=entity_type,
                    entity_id=entity_id,
                    entity_name=entity_name,
                    user_id=self.user_id,
                    user_email=self.user_email,
                    amount=amount,
                    previous_value=previous_value,
                    new_value=new_value,
                    metadata=metadata,
                    ip_address=ip_address or self.ip_address,
                    user_agent=user_agent or self.user_agent,
                )
            )
        except Exception as e:
            logger.warning(f"Failed to record activity {type} for {entity_type} {entity_id}: {e}")
            return None

    async def log_client_activity(self, type: str, client: Client, **kwargs) -> Optional[ActivityLog]:
        verb = type.rsplit("_", 1)[-1]
        return await self.log(
            type, f"Client {client.name} {verb}", "client", client.id, client.name, **kwargs
        )

    async def log_invoice_activity(self, type: str, invoice: Invoice, **kwargs) -> Optional[ActivityLog]:
        verb = type.rsplit("_", 1)[-1]
        kwargs.setdefault("amount", invoice.total)
        return await self.log(
            type,
            f"Invoice {invoice.invoice_number} {verb}",
            "invoice",
            invoice.id,
            invoice.invoice_number,
            **kwargs,
        )

    async def log_payment_activity(
        self, type: str, payment: Payment, invoice_number: str = "", **kwargs
    ) -> Optional[ActivityLog]:
        verb = type.rsplit("_", 1)[-1]
        target = f" for invoice {invoice_number}" if invoice_number else ""
        kwargs.setdefault("amount", payment.amount)
        kwargs.setdefault("metadata", {"invoice_id": payment.invoice_id})
        return await self.log(
            type,
            f"Payment of {payment.amount} {verb}{target}",
            "payment",
            payment.id,
            invoice_number or payment.id,
            **kwargs,
        )

    async def log_project_activity(self, type: str, project: Project, **kwargs) -> Optional[ActivityLog]:
        verb = type.rsplit("_", 1)[-1]
        return await self.log(
            type, f"Project {project.name} {verb}", "project", project.id, project.name, **kwargs
        )

    async def log_task_activity(self, type: str, task: Task, **kwargs) -> Optional[ActivityLog]:
        verb = type.rsplit("_", 1)[-1]
        kwargs.setdefault("metadata", {"project_id": task.project_id})
        return await self.log(type, f"Task {task.title} {verb}", "task", task.id, task.title, **kwargs)

    async def log_time_entry_activity(self, type: str, entry: TimeEntry, **kwargs) -> Optional[ActivityLog]:
        verb = type.rsplit("_", 1)[-1]
        kwargs.setdefault("metadata", {"task_id": entry.task_id, "duration": entry.duration})
        return await self.log(
            type,
            f"Time entry of {entry.hours:.2f}h {verb}",
            "time_entry",
            entry.id,
            entry.description or entry.id,
            **kwargs,
        )

    async def log_template_activity(self, type: str, template: Template, **kwargs) -> Optional[ActivityLog]:
        verb = type.rsplit("_", 1)[-1]
        return await self.log(
            type, f"Template {template.name} {verb}", "template", template.id, template.name, **kwargs
        )

    async def log_settings_activity(self, changed: Dict[str, Any], **kwargs) -> Optional[ActivityLog]:
        return await self.log(
            ActivityType.SETTINGS_UPDATED,
            f"Company settings updated ({', '.join(sorted(changed))})",
            "settings",
            "company",
            "Company settings",
            new_value=", ".join(f"{key}={value}" for key, value in sorted(changed.items())),
            **kwargs,
        )
