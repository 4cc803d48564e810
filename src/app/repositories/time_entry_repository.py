"""Time Entry Repository Interface"""

from abc import abstractmethod
from typing import List

from src.app.repositories.base import EntityRepository
from src.domain.time_entry import TimeEntry, TimeEntryCreate, TimeEntryUpdate


class TimeEntryRepository(EntityRepository[TimeEntry, TimeEntryCreate, TimeEntryUpdate]):
    """
    Repository interface for TimeEntry persistence

    Every create/update/delete recomputes the parent task's hours.
    """

    @abstractmethod
    async def list_by_task(self, task_id: str) -> List[TimeEntry]:
        pass

    @abstractmethod
    async def list_by_project(self, project_id: str) -> List[TimeEntry]:
        pass

    @abstractmethod
    async def delete_by_task(self, task_id: str) -> int:
        """
        Delete every time entry of a task in one batch

        Returns:
            Number of entries removed (0 when there were none)
        """
        pass
