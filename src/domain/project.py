"""Project Domain Entity

Client work grouped into tasks with tracked time.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import Field

from src.domain.base import BaseModel, generate_id, utcnow


class ProjectStatus(str, Enum):
    """Project lifecycle states"""
    PLANNING = "planning"
    ACTIVE = "active"
    ON_HOLD = "on-hold"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Project(BaseModel):
    """
    Project - Unit of client work

    Domain Rules:
    - Deleting a project deletes its tasks (and their time entries) first
    - end_date is optional (None = open-ended)
    """

    id: str = Field(default_factory=generate_id, description="Project identifier")
    name: str = Field(default="", description="Project name")
    description: Optional[str] = Field(default=None, description="Project description")
    client_id: str = Field(default="", description="Client the project is for")
    status: ProjectStatus = Field(default=ProjectStatus.PLANNING, description="Lifecycle state")
    start_date: datetime = Field(default_factory=utcnow, description="Start date")
    end_date: Optional[datetime] = Field(default=None, description="Optional end date")
    budget: Optional[Decimal] = Field(default=None, description="Optional budget")
    hourly_rate: Optional[Decimal] = Field(default=None, description="Default hourly rate")
    is_active: bool = Field(default=True, description="Whether the project accepts time entries")
    created_at: datetime = Field(default_factory=utcnow, description="Creation timestamp")
    updated_at: datetime = Field(default_factory=utcnow, description="Last update timestamp")


class ProjectCreate(BaseModel):
    name: str
    client_id: str
    description: Optional[str] = None
    status: ProjectStatus = ProjectStatus.PLANNING
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    budget: Optional[Decimal] = None
    hourly_rate: Optional[Decimal] = None
    is_active: bool = True


class ProjectUpdate(BaseModel):
    name: Optional[str] = None
    client_id: Optional[str] = None
    description: Optional[str] = None
    status: Optional[ProjectStatus] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    budget: Optional[Decimal] = None
    hourly_rate: Optional[Decimal] = None
    is_active: Optional[bool] = None
