"""Task API Routes"""

from typing import List, Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import Response

from src.adapter.repositories.store import SheetsStore
from src.api.error import not_found
from src.app.services.activity_logger import ActivityLogger, ActivityType
from src.depends import get_activity_logger, get_store
from src.domain.task import Task, TaskCreate, TaskUpdate
from src.domain.time_entry import TimeEntry

router = APIRouter(prefix="/tasks", tags=["Tasks"])


@router.get("", response_model=List[Task])
async def list_tasks(project_id: Optional[str] = None, store: SheetsStore = Depends(get_store)):
    if project_id:
        return await store.tasks.list_by_project(project_id)
    return await store.tasks.list()


@router.get("/{task_id}", response_model=Task)
async def get_task(task_id: str, store: SheetsStore = Depends(get_store)):
    task = await store.tasks.get(task_id)
    if task is None:
        raise not_found("task", task_id)
    return task


@router.get("/{task_id}/time-entries", response_model=List[TimeEntry])
async def list_task_time_entries(task_id: str, store: SheetsStore = Depends(get_store)):
    return await store.time_entries.list_by_task(task_id)


@router.post("", response_model=Task, status_code=status.HTTP_201_CREATED)
async def create_task(
    request: TaskCreate,
    store: SheetsStore = Depends(get_store),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    if await store.projects.get(request.project_id) is None:
        raise not_found("project", request.project_id)
    task = await store.tasks.create(request)
    await activity.log_task_activity(ActivityType.TASK_CREATED, task)
    return task


@router.put("/{task_id}", response_model=Task)
async def update_task(
    task_id: str,
    request: TaskUpdate,
    store: SheetsStore = Depends(get_store),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    task = await store.tasks.update(task_id, request)
    if task is None:
        raise not_found("task", task_id)
    await activity.log_task_activity(ActivityType.TASK_UPDATED, task)
    return task


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: str,
    store: SheetsStore = Depends(get_store),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    task = await store.tasks.get(task_id)
    if task is None or not await store.tasks.delete(task_id):
        raise not_found("task", task_id)
    await activity.log_task_activity(ActivityType.TASK_DELETED, task)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
