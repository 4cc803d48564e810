"""Sheets Activity Log Repository Implementation

Append-only writes; reads pull the whole table and filter, sort and page
in memory.
"""

from typing import Callable, List

from src.adapter.repositories.sheets_base import SheetsEntityRepository
from src.adapter.services.cache import TTLCache
from src.adapter.sheets.table import SheetTable
from src.app.repositories.activity_log_repository import ActivityLogRepository
from src.domain.activity_log import (
    ActivityLog,
    ActivityLogCreate,
    ActivityLogFilters,
    ActivityLogPage,
)
from src.domain.base import utcnow


def matches(log: ActivityLog, filters: ActivityLogFilters) -> bool:
    """Whether a log entry passes every set filter (date range inclusive)"""
    if filters.type and log.type != filters.type:
        return False
    if filters.entity_type and log.entity_type != filters.entity_type:
        return False
    if filters.entity_id and log.entity_id != filters.entity_id:
        return False
    if filters.user_id and log.user_id != filters.user_id:
        return False
    if filters.date_from and log.timestamp < filters.date_from:
        return False
    if filters.date_to and log.timestamp > filters.date_to:
        return False
    if filters.search:
        needle = filters.search.lower()
        haystack = (log.description, log.entity_name, log.user_email or "")
        if not any(needle in field.lower() for field in haystack):
            return False
    return True


class SheetsActivityLogRepository(SheetsEntityRepository[ActivityLog], ActivityLogRepository):
    """Activity log store on the ``ActivityLogs`` table"""

    entity_name = "activity log"

    def __init__(self, table: SheetTable[ActivityLog], cache: TTLCache, now: Callable = utcnow):
        super().__init__(table, cache, now)

    async def create(self, data: ActivityLogCreate) -> ActivityLog:
        log = ActivityLog(**data.model_dump(), timestamp=self._now())
        await self.table.append([log])
        self.invalidate()
        return log

    async def query(
        self,
        filters: ActivityLogFilters,
        page: int = 1,
        limit: int = 50,
    ) -> ActivityLogPage:
        page = max(1, page)
        limit = max(1, limit)

        logs: List[ActivityLog] = [log for log in await self.list() if matches(log, filters)]
        logs.sort(key=lambda log: log.timestamp, reverse=True)

        start = (page - 1) * limit
        return ActivityLogPage(
            logs=logs[start:start + limit],
            total=len(logs),
            page=page,
            limit=limit,
            has_more=start + limit < len(logs),
        )
