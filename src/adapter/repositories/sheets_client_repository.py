"""Sheets Client Repository Implementation"""

from typing import Optional

from src.adapter.repositories.sheets_base import SheetsEntityRepository, patch_values
from src.app.errors import ValidationError
from src.app.repositories.client_repository import ClientRepository
from src.domain.client import Client, ClientCreate, ClientUpdate


class SheetsClientRepository(SheetsEntityRepository[Client], ClientRepository):
    """Client store on the ``Clients`` table"""

    entity_name = "client"

    async def create(self, data: ClientCreate) -> Client:
        now = self._now()
        client = Client(
            name=data.name,
            email=data.email,
            phone=data.phone,
            address=data.address,
            created_at=now,
            updated_at=now,
        )
        await self.table.append([client])
        self.invalidate()
        return client

    async def update(self, client_id: str, patch: ClientUpdate) -> Optional[Client]:
        values = patch_values(patch, Client)
        return await self._update_row(client_id, lambda client: client.model_copy(update=values))

    async def update_strict(self, client_id: str, patch: ClientUpdate) -> Client:
        client = await self.update(client_id, patch)
        if client is None:
            raise ValidationError(f"Client {client_id} not found", operation="update_client")
        return client

    async def delete(self, client_id: str) -> bool:
        return await self._delete_row(client_id)
