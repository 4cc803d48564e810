"""Data Transfer Objects for Activity Log Use Cases"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from src.domain.activity_log import ActivityLogFilters


class ListActivityLogsQueryDTO(BaseModel):
    """
    Query DTO for listing activity logs

    Used as input to ListActivityLogs use case.
    """

    type: Optional[str] = Field(default=None, description="Exact event type (e.g., invoice_created)")
    entity_type: Optional[str] = Field(default=None, description="Exact entity type (e.g., invoice)")
    entity_id: Optional[str] = Field(default=None, description="Exact entity id")
    user_id: Optional[str] = Field(default=None, description="Exact acting user id")
    date_from: Optional[datetime] = Field(default=None, description="Inclusive lower bound")
    date_to: Optional[datetime] = Field(default=None, description="Inclusive upper bound")
    search: Optional[str] = Field(
        default=None,
        description="Case-insensitive substring over description, entity name and user email"
    )
    page: int = Field(default=1, ge=1, description="1-based page number")
    limit: int = Field(default=50, ge=1, le=500, description="Page size")

    def to_filters(self) -> ActivityLogFilters:
        return ActivityLogFilters(**self.model_dump(exclude={"page", "limit"}))
