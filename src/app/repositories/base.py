"""Entity Repository Interface

Common contract shared by every spreadsheet-backed entity store.
"""

from abc import ABC, abstractmethod
from typing import Generic, List, Optional, TypeVar

E = TypeVar("E")
C = TypeVar("C")
U = TypeVar("U")


class EntityRepository(ABC, Generic[E, C, U]):
    """
    CRUD contract for one entity collection

    Absence is reported as ``None`` / ``False`` / ``[]``; exceptions are
    reserved for classified remote store failures.
    """

    @abstractmethod
    async def list(self) -> List[E]:
        """
        Retrieve every entity in the collection

        Returns:
            All entities (empty list if the read failed; the failure is logged)
        """
        pass

    @abstractmethod
    async def get(self, entity_id: str) -> Optional[E]:
        """
        Retrieve one entity by id

        Args:
            entity_id: Entity identifier

        Returns:
            Entity if found, None otherwise
        """
        pass

    @abstractmethod
    async def create(self, data: C) -> E:
        """
        Create a new entity with a generated id and timestamps

        Args:
            data: Creation payload

        Returns:
            Created entity
        """
        pass

    @abstractmethod
    async def update(self, entity_id: str, patch: U) -> Optional[E]:
        """
        Apply the explicitly set fields of ``patch`` to an entity

        Args:
            entity_id: Entity identifier
            patch: Partial update

        Returns:
            Updated entity, or None if it does not exist
        """
        pass

    @abstractmethod
    async def delete(self, entity_id: str) -> bool:
        """
        Delete an entity (and its dependent rows, where it has any)

        Returns:
            True if the entity existed and was removed, False otherwise
        """
        pass
