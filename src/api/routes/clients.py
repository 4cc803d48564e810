"""Client API Routes"""

from typing import List

from fastapi import APIRouter, Depends, status
from fastapi.responses import Response

from src.adapter.repositories.store import SheetsStore
from src.api.error import not_found
from src.app.services.activity_logger import ActivityLogger, ActivityType
from src.depends import get_activity_logger, get_store
from src.domain.client import Client, ClientCreate, ClientUpdate
from src.domain.invoice import Invoice
from src.domain.project import Project

router = APIRouter(prefix="/clients", tags=["Clients"])


@router.get("", response_model=List[Client])
async def list_clients(store: SheetsStore = Depends(get_store)):
    return await store.clients.list()


@router.get("/{client_id}", response_model=Client)
async def get_client(client_id: str, store: SheetsStore = Depends(get_store)):
    client = await store.clients.get(client_id)
    if client is None:
        raise not_found("client", client_id)
    return client


@router.get("/{client_id}/invoices", response_model=List[Invoice])
async def list_client_invoices(client_id: str, store: SheetsStore = Depends(get_store)):
    return await store.invoices.list_by_client(client_id)


@router.get("/{client_id}/projects", response_model=List[Project])
async def list_client_projects(client_id: str, store: SheetsStore = Depends(get_store)):
    return await store.projects.list_by_client(client_id)


@router.post("", response_model=Client, status_code=status.HTTP_201_CREATED)
async def create_client(
    request: ClientCreate,
    store: SheetsStore = Depends(get_store),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    client = await store.clients.create(request)
    await activity.log_client_activity(ActivityType.CLIENT_ADDED, client)
    return client


@router.put("/{client_id}", response_model=Client)
async def update_client(
    client_id: str,
    request: ClientUpdate,
    store: SheetsStore = Depends(get_store),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    client = await store.clients.update(client_id, request)
    if client is None:
        raise not_found("client", client_id)
    await activity.log_client_activity(
        ActivityType.CLIENT_UPDATED, client, metadata={"fields": sorted(request.model_fields_set)}
    )
    return client


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_client(
    client_id: str,
    store: SheetsStore = Depends(get_store),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    client = await store.clients.get(client_id)
    if client is None or not await store.clients.delete(client_id):
        raise not_found("client", client_id)
    await activity.log_client_activity(ActivityType.CLIENT_DELETED, client)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
