"""Task Domain Entity

Unit of work inside a project. Hours are derived from time entries.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field

from src.domain.base import BaseModel, generate_id, utcnow


class TaskStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    REVIEW = "review"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class Task(BaseModel):
    """
    Task - Trackable piece of project work

    Domain Rules:
    - actual_hours = sum(duration / 3600) over all time entries of the task
    - billable_hours = same sum restricted to billable entries
    - Both are recomputed on every time entry create/update/delete and are
      never accepted from callers
    """

    id: str = Field(default_factory=generate_id, description="Task identifier")
    project_id: str = Field(default="", description="Owning project")
    title: str = Field(default="", description="Task title")
    description: Optional[str] = Field(default=None, description="Task description")
    status: TaskStatus = Field(default=TaskStatus.TODO, description="Workflow state")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM, description="Priority")
    assigned_to: Optional[str] = Field(default=None, description="Assignee")
    due_date: Optional[datetime] = Field(default=None, description="Optional due date")
    estimated_hours: Optional[float] = Field(default=None, description="Estimate in hours")
    actual_hours: float = Field(default=0.0, description="Tracked hours (derived)")
    billable_hours: float = Field(default=0.0, description="Tracked billable hours (derived)")
    is_billable: bool = Field(default=True, description="Default billability for new entries")
    tags: List[str] = Field(default_factory=list, description="Free-form tags")
    created_at: datetime = Field(default_factory=utcnow, description="Creation timestamp")
    updated_at: datetime = Field(default_factory=utcnow, description="Last update timestamp")


class TaskCreate(BaseModel):
    project_id: str
    title: str
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    assigned_to: Optional[str] = None
    due_date: Optional[datetime] = None
    estimated_hours: Optional[float] = None
    is_billable: bool = True
    tags: List[str] = Field(default_factory=list)


class TaskUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    assigned_to: Optional[str] = None
    due_date: Optional[datetime] = None
    estimated_hours: Optional[float] = None
    is_billable: Optional[bool] = None
    tags: Optional[List[str]] = None
