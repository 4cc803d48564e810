"""Time Entry Domain Entity

Tracked span of work on a task.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field

from src.domain.base import BaseModel, generate_id, utcnow

SECONDS_PER_HOUR = 3600


class TimeEntry(BaseModel):
    """
    Time Entry - Work logged against a task

    Domain Rules:
    - duration is in seconds
    - project_id is copied from the task on create
    - Every mutation recomputes the parent task's hours
    """

    id: str = Field(default_factory=generate_id, description="Time entry identifier")
    task_id: str = Field(default="", description="Task the time was spent on")
    project_id: str = Field(default="", description="Project of the task")
    description: Optional[str] = Field(default=None, description="What was done")
    start_time: datetime = Field(default_factory=utcnow, description="Start of the work span")
    end_time: Optional[datetime] = Field(default=None, description="End of the span (None = running)")
    duration: int = Field(default=0, description="Duration in seconds")
    is_billable: bool = Field(default=True, description="Whether the time is billable")
    hourly_rate: Optional[Decimal] = Field(default=None, description="Rate override")
    created_at: datetime = Field(default_factory=utcnow, description="Creation timestamp")
    updated_at: datetime = Field(default_factory=utcnow, description="Last update timestamp")

    @property
    def hours(self) -> float:
        return self.duration / SECONDS_PER_HOUR


class TimeEntryCreate(BaseModel):
    task_id: str
    start_time: datetime
    end_time: Optional[datetime] = None
    duration: Optional[int] = Field(default=None, ge=0)
    description: Optional[str] = None
    is_billable: bool = True
    hourly_rate: Optional[Decimal] = None

    def resolved_duration(self) -> int:
        """Explicit duration, else end_time - start_time in seconds, else 0"""
        if self.duration is not None:
            return self.duration
        if self.end_time is not None:
            return max(0, int((self.end_time - self.start_time).total_seconds()))
        return 0


class TimeEntryUpdate(BaseModel):
    description: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    duration: Optional[int] = Field(default=None, ge=0)
    is_billable: Optional[bool] = None
    hourly_rate: Optional[Decimal] = None
