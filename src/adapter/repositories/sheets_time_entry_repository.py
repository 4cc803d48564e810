"""Sheets Time Entry Repository Implementation

Time entry writes recompute the parent task's tracked hours.
"""

import logging
from typing import Callable, List, Optional

from src.adapter.repositories.sheets_base import SheetsEntityRepository, patch_values
from src.adapter.services.cache import TTLCache
from src.adapter.sheets.table import SheetTable
from src.app.errors import ValidationError
from src.app.repositories.task_repository import TaskRepository
from src.app.repositories.time_entry_repository import TimeEntryRepository
from src.domain.base import utcnow
from src.domain.time_entry import SECONDS_PER_HOUR, TimeEntry, TimeEntryCreate, TimeEntryUpdate

logger = logging.getLogger(__name__)


class SheetsTimeEntryRepository(SheetsEntityRepository[TimeEntry], TimeEntryRepository):
    """
    Time entry store on the ``TimeEntries`` table

    Domain Rules:
    - task.actual_hours = sum(duration) / 3600 over the task's entries
    - task.billable_hours = same sum over billable entries only
    """

    entity_name = "time entry"

    def __init__(
        self,
        table: SheetTable[TimeEntry],
        cache: TTLCache,
        tasks: TaskRepository,
        now: Callable = utcnow,
    ):
        super().__init__(table, cache, now)
        self.tasks = tasks

    async def list_by_task(self, task_id: str) -> List[TimeEntry]:
        return await self._list_cached(f"by_task:{task_id}", lambda entry: entry.task_id == task_id)

    async def list_by_project(self, project_id: str) -> List[TimeEntry]:
        return await self._list_cached(
            f"by_project:{project_id}", lambda entry: entry.project_id == project_id
        )

    async def recompute_task_hours(self, task_id: str) -> None:
        entries = await self.find_all(lambda entry: entry.task_id == task_id)
        total = sum(entry.duration for entry in entries)
        billable = sum(entry.duration for entry in entries if entry.is_billable)
        await self.tasks.set_hours(task_id, total / SECONDS_PER_HOUR, billable / SECONDS_PER_HOUR)

    async def create(self, data: TimeEntryCreate) -> TimeEntry:
        task = await self.tasks.get(data.task_id)
        if task is None:
            raise ValidationError(f"Task {data.task_id} not found", operation="create_time_entry")

        now = self._now()
        entry = TimeEntry(
            task_id=task.id,
            project_id=task.project_id,
            description=data.description,
            start_time=data.start_time,
            end_time=data.end_time,
            duration=data.resolved_duration(),
            is_billable=data.is_billable,
            hourly_rate=data.hourly_rate,
            created_at=now,
            updated_at=now,
        )
        await self.table.append([entry])
        self.invalidate()
        await self.recompute_task_hours(entry.task_id)
        return entry

    async def update(self, entry_id: str, patch: TimeEntryUpdate) -> Optional[TimeEntry]:
        values = patch_values(patch, TimeEntry)

        def apply(entry: TimeEntry) -> TimeEntry:
            entry = entry.model_copy(update=values)
            span_changed = "start_time" in values or "end_time" in values
            if span_changed and "duration" not in values and entry.end_time is not None:
                entry.duration = max(0, int((entry.end_time - entry.start_time).total_seconds()))
            return entry

        entry = await self._update_row(entry_id, apply)
        if entry is not None:
            await self.recompute_task_hours(entry.task_id)
        return entry

    async def delete(self, entry_id: str) -> bool:
        found = await self.table.find(entry_id)
        if found is None:
            return False
        row_number, entry = found
        await self.table.delete_rows([row_number])
        self.invalidate()
        await self.recompute_task_hours(entry.task_id)
        return True

    async def delete_by_task(self, task_id: str) -> int:
        rows = await self.table.find_where(lambda entry: entry.task_id == task_id)
        deleted = await self.table.delete_rows(row_number for row_number, _ in rows)
        self.invalidate()
        if deleted:
            logger.info(f"Deleted {deleted} time entries of task {task_id}")
        return deleted
