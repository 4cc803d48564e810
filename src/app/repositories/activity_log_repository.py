"""Activity Log Repository Interface

Append-only audit trail with in-memory filtering and pagination.
"""

from abc import ABC, abstractmethod
from typing import List

from src.domain.activity_log import (
    ActivityLog,
    ActivityLogCreate,
    ActivityLogFilters,
    ActivityLogPage,
)


class ActivityLogRepository(ABC):
    """Repository interface for ActivityLog persistence"""

    @abstractmethod
    async def create(self, data: ActivityLogCreate) -> ActivityLog:
        """
        Append a log entry (no read before write)

        Returns:
            Created ActivityLog with generated id and timestamp
        """
        pass

    @abstractmethod
    async def list(self) -> List[ActivityLog]:
        pass

    @abstractmethod
    async def query(
        self,
        filters: ActivityLogFilters,
        page: int = 1,
        limit: int = 50,
    ) -> ActivityLogPage:
        """
        Filter, sort (newest first) and paginate the log

        Args:
            filters: Exact-match, date-range and free-text filters
            page: 1-based page number
            limit: Page size

        Returns:
            ActivityLogPage with logs, total, page, limit and has_more
        """
        pass
