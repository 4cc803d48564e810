"""ListActivityLogs Use Case

Returns a filtered, newest-first page of the activity log.
"""

from libs.result import Error, Result, Return
from src.app.repositories.activity_log_repository import ActivityLogRepository
from src.domain.activity_log import ActivityLogPage
from .dtos import ListActivityLogsQueryDTO


class ListActivityLogs:
    """
    Use Case: List activity logs

    Business Rules:
    1. date_from <= timestamp <= date_to (inclusive)
    2. Sorted by timestamp, newest first
    3. has_more is true when entries exist past this page
    """

    def __init__(self, activity_log_repo: ActivityLogRepository):
        self.activity_log_repo = activity_log_repo

    async def execute(self, query: ListActivityLogsQueryDTO) -> Result[ActivityLogPage]:
        filters = query.to_filters()
        if filters.date_from and filters.date_to and filters.date_from > filters.date_to:
            return Return.err(
                Error(
                    code="INVALID_DATE_RANGE",
                    message="date_from must not be after date_to",
                )
            )

        try:
            page = await self.activity_log_repo.query(
                filters, page=query.page, limit=query.limit
            )
            return Return.ok(page)
        except Exception as e:
            return Return.err(
                Error(
                    code="LIST_ACTIVITY_LOGS_FAILED",
                    message="Failed to list activity logs",
                    reason=str(e),
                )
            )
