"""Sheets Project Repository Implementation"""

import logging
from typing import Callable, List, Optional

from src.adapter.repositories.sheets_base import SheetsEntityRepository, patch_values
from src.adapter.repositories.sheets_task_repository import SheetsTaskRepository
from src.adapter.repositories.sheets_time_entry_repository import SheetsTimeEntryRepository
from src.adapter.services.cache import TTLCache
from src.adapter.sheets.saga import DeleteSaga
from src.adapter.sheets.table import SheetTable
from src.app.repositories.project_repository import ProjectRepository
from src.domain.base import utcnow
from src.domain.project import Project, ProjectCreate, ProjectUpdate

logger = logging.getLogger(__name__)


class SheetsProjectRepository(SheetsEntityRepository[Project], ProjectRepository):
    """
    Project store on the ``Projects`` table

    Domain Rules:
    - Delete runs as a saga: each task's time entries, then the tasks,
      then the project row
    """

    entity_name = "project"

    def __init__(
        self,
        table: SheetTable[Project],
        cache: TTLCache,
        tasks: SheetsTaskRepository,
        time_entries: SheetsTimeEntryRepository,
        now: Callable = utcnow,
    ):
        super().__init__(table, cache, now)
        self.tasks = tasks
        self.time_entries = time_entries

    async def list_by_client(self, client_id: str) -> List[Project]:
        return await self._list_cached(
            f"by_client:{client_id}", lambda project: project.client_id == client_id
        )

    async def create(self, data: ProjectCreate) -> Project:
        now = self._now()
        project = Project(
            name=data.name,
            description=data.description,
            client_id=data.client_id,
            status=data.status,
            start_date=data.start_date or now,
            end_date=data.end_date,
            budget=data.budget,
            hourly_rate=data.hourly_rate,
            is_active=data.is_active,
            created_at=now,
            updated_at=now,
        )
        await self.table.append([project])
        self.invalidate()
        return project

    async def update(self, project_id: str, patch: ProjectUpdate) -> Optional[Project]:
        values = patch_values(patch, Project)
        return await self._update_row(project_id, lambda project: project.model_copy(update=values))

    async def delete(self, project_id: str) -> bool:
        if await self.table.find(project_id) is None:
            return False

        tasks = await self.tasks.find_all(lambda task: task.project_id == project_id)
        saga = DeleteSaga(f"delete_project:{project_id}")
        for task in tasks:
            saga.add_step(
                f"delete_time_entries:{task.id}",
                lambda task_id=task.id: self.time_entries.delete_by_task(task_id),
            )
        saga.add_step("delete_tasks", lambda: self.tasks.delete_by_project(project_id))
        saga.add_step("delete_project", lambda: self._delete_row(project_id))
        try:
            await saga.run()
        finally:
            self.invalidate()
        logger.info(f"Deleted project {project_id} with {len(tasks)} task(s)")
        return True
