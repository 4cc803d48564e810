"""Time Entry API Routes"""

from typing import List, Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import Response

from src.adapter.repositories.store import SheetsStore
from src.api.error import not_found
from src.app.services.activity_logger import ActivityLogger, ActivityType
from src.depends import get_activity_logger, get_store
from src.domain.time_entry import TimeEntry, TimeEntryCreate, TimeEntryUpdate

router = APIRouter(prefix="/time-entries", tags=["Time Entries"])


@router.get("", response_model=List[TimeEntry])
async def list_time_entries(
    task_id: Optional[str] = None,
    project_id: Optional[str] = None,
    store: SheetsStore = Depends(get_store),
):
    if task_id:
        return await store.time_entries.list_by_task(task_id)
    if project_id:
        return await store.time_entries.list_by_project(project_id)
    return await store.time_entries.list()


@router.get("/{entry_id}", response_model=TimeEntry)
async def get_time_entry(entry_id: str, store: SheetsStore = Depends(get_store)):
    entry = await store.time_entries.get(entry_id)
    if entry is None:
        raise not_found("time_entry", entry_id)
    return entry


@router.post("", response_model=TimeEntry, status_code=status.HTTP_201_CREATED)
async def create_time_entry(
    request: TimeEntryCreate,
    store: SheetsStore = Depends(get_store),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    """Log time on a task; the task's actual and billable hours are recomputed"""
    entry = await store.time_entries.create(request)
    await activity.log_time_entry_activity(ActivityType.TIME_ENTRY_CREATED, entry)
    return entry


@router.put("/{entry_id}", response_model=TimeEntry)
async def update_time_entry(
    entry_id: str,
    request: TimeEntryUpdate,
    store: SheetsStore = Depends(get_store),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    entry = await store.time_entries.update(entry_id, request)
    if entry is None:
        raise not_found("time_entry", entry_id)
    await activity.log_time_entry_activity(ActivityType.TIME_ENTRY_UPDATED, entry)
    return entry


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_time_entry(
    entry_id: str,
    store: SheetsStore = Depends(get_store),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    entry = await store.time_entries.get(entry_id)
    if entry is None or not await store.time_entries.delete(entry_id):
        raise not_found("time_entry", entry_id)
    await activity.log_time_entry_activity(ActivityType.TIME_ENTRY_DELETED, entry)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
