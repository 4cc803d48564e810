"""Project API Routes"""

from typing import List, Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import Response

from src.adapter.repositories.store import SheetsStore
from src.api.error import not_found
from src.app.services.activity_logger import ActivityLogger, ActivityType
from src.depends import get_activity_logger, get_store
from src.domain.project import Project, ProjectCreate, ProjectUpdate
from src.domain.task import Task
from src.domain.time_entry import TimeEntry

router = APIRouter(prefix="/projects", tags=["Projects"])


@router.get("", response_model=List[Project])
async def list_projects(client_id: Optional[str] = None, store: SheetsStore = Depends(get_store)):
    if client_id:
        return await store.projects.list_by_client(client_id)
    return await store.projects.list()


@router.get("/{project_id}", response_model=Project)
async def get_project(project_id: str, store: SheetsStore = Depends(get_store)):
    project = await store.projects.get(project_id)
    if project is None:
        raise not_found("project", project_id)
    return project


@router.get("/{project_id}/tasks", response_model=List[Task])
async def list_project_tasks(project_id: str, store: SheetsStore = Depends(get_store)):
    return await store.tasks.list_by_project(project_id)


@router.get("/{project_id}/time-entries", response_model=List[TimeEntry])
async def list_project_time_entries(project_id: str, store: SheetsStore = Depends(get_store)):
    return await store.time_entries.list_by_project(project_id)


@router.post("", response_model=Project, status_code=status.HTTP_201_CREATED)
async def create_project(
    request: ProjectCreate,
    store: SheetsStore = Depends(get_store),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    project = await store.projects.create(request)
    await activity.log_project_activity(ActivityType.PROJECT_CREATED, project)
    return project


@router.put("/{project_id}", response_model=Project)
async def update_project(
    project_id: str,
    request: ProjectUpdate,
    store: SheetsStore = Depends(get_store),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    project = await store.projects.update(project_id, request)
    if project is None:
        raise not_found("project", project_id)
    await activity.log_project_activity(ActivityType.PROJECT_UPDATED, project)
    return project


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(
    project_id: str,
    store: SheetsStore = Depends(get_store),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    """
    Delete a project with its tasks and their time entries.

    A failure part way returns 409 with code `CASCADE_INCOMPLETE`; calling
    the endpoint again finishes the remaining steps.
    """
    project = await store.projects.get(project_id)
    if project is None or not await store.projects.delete(project_id):
        raise not_found("project", project_id)
    await activity.log_project_activity(ActivityType.PROJECT_DELETED, project)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
