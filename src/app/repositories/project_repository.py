"""Project Repository Interface"""

from abc import abstractmethod
from typing import List

from src.app.repositories.base import EntityRepository
from src.domain.project import Project, ProjectCreate, ProjectUpdate


class ProjectRepository(EntityRepository[Project, ProjectCreate, ProjectUpdate]):
    """
    Repository interface for Project persistence

    ``delete`` cascades to the project's tasks and their time entries.
    """

    @abstractmethod
    async def list_by_client(self, client_id: str) -> List[Project]:
        pass
