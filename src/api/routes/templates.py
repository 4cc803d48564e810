"""Template API Routes"""

from typing import List

from fastapi import APIRouter, Depends, status
from fastapi.responses import Response

from src.adapter.repositories.store import SheetsStore
from src.api.error import not_found
from src.app.services.activity_logger import ActivityLogger, ActivityType
from src.depends import get_activity_logger, get_store
from src.domain.template import Template, TemplateCreate, TemplateUpdate

router = APIRouter(prefix="/templates", tags=["Templates"])


@router.get("", response_model=List[Template])
async def list_templates(active_only: bool = False, store: SheetsStore = Depends(get_store)):
    if active_only:
        return await store.templates.list_active()
    return await store.templates.list()


@router.get("/{template_id}", response_model=Template)
async def get_template(template_id: str, store: SheetsStore = Depends(get_store)):
    template = await store.templates.get(template_id)
    if template is None:
        raise not_found("template", template_id)
    return template


@router.post("", response_model=Template, status_code=status.HTTP_201_CREATED)
async def create_template(
    request: TemplateCreate,
    store: SheetsStore = Depends(get_store),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    template = await store.templates.create(request)
    await activity.log_template_activity(ActivityType.TEMPLATE_CREATED, template)
    return template


@router.put("/{template_id}", response_model=Template)
async def update_template(
    template_id: str,
    request: TemplateUpdate,
    store: SheetsStore = Depends(get_store),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    template = await store.templates.update(template_id, request)
    if template is None:
        raise not_found("template", template_id)
    await activity.log_template_activity(ActivityType.TEMPLATE_UPDATED, template)
    return template


@router.delete("/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_template(
    template_id: str,
    store: SheetsStore = Depends(get_store),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    template = await store.templates.get(template_id)
    if template is None or not await store.templates.delete(template_id):
        raise not_found("template", template_id)
    await activity.log_template_activity(ActivityType.TEMPLATE_DELETED, template)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
