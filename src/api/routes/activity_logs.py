"""Activity Log API Routes"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from src.adapter.repositories.store import SheetsStore
from src.api.error import ClientError
from src.app.use_cases.activity import ListActivityLogs, ListActivityLogsQueryDTO
from src.depends import get_store
from src.domain.activity_log import ActivityLogPage

router = APIRouter(prefix="/activity-logs", tags=["Activity Logs"])


@router.get("", response_model=ActivityLogPage)
async def list_activity_logs(
    type: Optional[str] = None,
    entity_type: Optional[str] = None,
    entity_id: Optional[str] = None,
    user_id: Optional[str] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    search: Optional[str] = None,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=50, ge=1, le=500),
    store: SheetsStore = Depends(get_store),
):
    """
    List activity logs, newest first.

    **Query parameters:**
    - `type`, `entity_type`, `entity_id`, `user_id` (optional): Exact matches
    - `date_from`, `date_to` (optional): Inclusive timestamp range
    - `search` (optional): Case-insensitive match on description, entity name or user email
    - `page`, `limit`: Pagination (1-based page)
    """
    query = ListActivityLogsQueryDTO(
        type=type,
        entity_type=entity_type,
        entity_id=entity_id,
        user_id=user_id,
        date_from=date_from,
        date_to=date_to,
        search=search,
        page=page,
        limit=limit,
    )
    result = await ListActivityLogs(store.activity_logs).execute(query)

    if result.is_err():
        if result.error.code == "INVALID_DATE_RANGE":
            raise ClientError(result.error, status_code=status.HTTP_422_UNPROCESSABLE_ENTITY)
        raise ClientError(result.error)

    return result.value
