"""Sheets Task Repository Implementation"""

from typing import TYPE_CHECKING, Callable, List, Optional

from src.adapter.repositories.sheets_base import SheetsEntityRepository, patch_values
from src.adapter.services.cache import TTLCache
from src.adapter.sheets.saga import DeleteSaga
from src.adapter.sheets.table import SheetTable
from src.app.repositories.task_repository import TaskRepository
from src.domain.base import utcnow
from src.domain.task import Task, TaskCreate, TaskUpdate

if TYPE_CHECKING:
    from src.adapter.repositories.sheets_time_entry_repository import SheetsTimeEntryRepository


class SheetsTaskRepository(SheetsEntityRepository[Task], TaskRepository):
    """
    Task store on the ``Tasks`` table

    ``time_entries`` is attached after construction because time entries
    in turn write derived hours back to tasks.
    """

    entity_name = "task"

    def __init__(
        self,
        table: SheetTable[Task],
        cache: TTLCache,
        time_entries: Optional["SheetsTimeEntryRepository"] = None,
        now: Callable = utcnow,
    ):
        super().__init__(table, cache, now)
        self.time_entries = time_entries

    async def list_by_project(self, project_id: str) -> List[Task]:
        return await self._list_cached(
            f"by_project:{project_id}", lambda task: task.project_id == project_id
        )

    async def create(self, data: TaskCreate) -> Task:
        now = self._now()
        task = Task(
            project_id=data.project_id,
            title=data.title,
            description=data.description,
            status=data.status,
            priority=data.priority,
            assigned_to=data.assigned_to,
            due_date=data.due_date,
            estimated_hours=data.estimated_hours,
            is_billable=data.is_billable,
            tags=list(data.tags),
            created_at=now,
            updated_at=now,
        )
        await self.table.append([task])
        self.invalidate()
        return task

    async def update(self, task_id: str, patch: TaskUpdate) -> Optional[Task]:
        values = patch_values(patch, Task)
        return await self._update_row(task_id, lambda task: task.model_copy(update=values))

    async def set_hours(self, task_id: str, actual_hours: float, billable_hours: float) -> Optional[Task]:
        return await self._update_row(
            task_id,
            lambda task: task.model_copy(
                update={"actual_hours": actual_hours, "billable_hours": billable_hours}
            ),
        )

    async def delete_by_project(self, project_id: str) -> int:
        """Remove every task row of a project in one batch; returns the count"""
        rows = await self.table.find_where(lambda task: task.project_id == project_id)
        deleted = await self.table.delete_rows(row_number for row_number, _ in rows)
        self.invalidate()
        return deleted

    async def delete(self, task_id: str) -> bool:
        if await self.table.find(task_id) is None:
            return False
        saga = DeleteSaga(f"delete_task:{task_id}")
        if self.time_entries is not None:
            saga.add_step("delete_time_entries", lambda: self.time_entries.delete_by_task(task_id))
        saga.add_step("delete_task", lambda: self._delete_row(task_id))
        try:
            await saga.run()
        finally:
            self.invalidate()
        return True
