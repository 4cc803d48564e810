"""Activity Log Domain Entity

Append-only audit trail of business events.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional

from pydantic import Field

from src.domain.base import BaseModel, generate_id, utcnow


class ActivityLog(BaseModel):
    """
    Activity Log - Immutable record of something that happened

    Domain Rules:
    - Logs are append-only; never updated or deleted by the store
    - metadata is free-form JSON
    """

    id: str = Field(default_factory=generate_id, description="Log identifier")
    type: str = Field(default="", description="Event type (e.g., invoice_created)")
    description: str = Field(default="", description="Human-readable description")
    entity_type: str = Field(default="", description="Kind of entity (client, invoice, ...)")
    entity_id: str = Field(default="", description="Id of the affected entity")
    entity_name: str = Field(default="", description="Display name of the affected entity")
    user_id: Optional[str] = Field(default=None, description="Acting user id")
    user_email: Optional[str] = Field(default=None, description="Acting user email")
    amount: Optional[Decimal] = Field(default=None, description="Money amount involved")
    previous_value: Optional[str] = Field(default=None, description="Serialized value before")
    new_value: Optional[str] = Field(default=None, description="Serialized value after")
    metadata: Optional[Dict[str, Any]] = Field(default=None, description="Extra context")
    ip_address: Optional[str] = Field(default=None, description="Request origin")
    user_agent: Optional[str] = Field(default=None, description="Request user agent")
    timestamp: datetime = Field(default_factory=utcnow, description="When it happened")


class ActivityLogCreate(BaseModel):
    type: str
    description: str
    entity_type: str
    entity_id: str
    entity_name: str = ""
    user_id: Optional[str] = None
    user_email: Optional[str] = None
    amount: Optional[Decimal] = None
    previous_value: Optional[str] = None
    new_value: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None


class ActivityLogFilters(BaseModel):
    type: Optional[str] = None
    entity_type: Optional[str] = None
    entity_id: Optional[str] = None
    user_id: Optional[str] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None
    search: Optional[str] = None


class ActivityLogPage(BaseModel):
    logs: List[ActivityLog]
    total: int
    page: int
    limit: int
    has_more: bool
