"""Task Repository Interface"""

from abc import abstractmethod
from typing import List, Optional

from src.app.repositories.base import EntityRepository
from src.domain.task import Task, TaskCreate, TaskUpdate


class TaskRepository(EntityRepository[Task, TaskCreate, TaskUpdate]):
    """
    Repository interface for Task persistence

    ``delete`` cascades to the task's time entries.
    """

    @abstractmethod
    async def list_by_project(self, project_id: str) -> List[Task]:
        pass

    @abstractmethod
    async def set_hours(self, task_id: str, actual_hours: float, billable_hours: float) -> Optional[Task]:
        """
        Store hours derived from the task's time entries

        Returns:
            Updated Task, or None if it does not exist
        """
        pass
