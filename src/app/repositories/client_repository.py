"""Client Repository Interface"""

from abc import abstractmethod

from src.app.repositories.base import EntityRepository
from src.domain.client import Client, ClientCreate, ClientUpdate


class ClientRepository(EntityRepository[Client, ClientCreate, ClientUpdate]):
    """Repository interface for Client persistence"""

    @abstractmethod
    async def update_strict(self, client_id: str, patch: ClientUpdate) -> Client:
        """
        Update a client that must exist

        Raises:
            ValidationError: When no client has this id
        """
        pass
