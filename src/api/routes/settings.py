"""Company Settings API Routes"""

from fastapi import APIRouter, Depends

from src.adapter.repositories.store import SheetsStore
from src.api.schemas.settings_request import CompanySettingsUpdateSchema
from src.app.services.activity_logger import ActivityLogger
from src.depends import get_activity_logger, get_store
from src.domain.settings import CompanySettings

router = APIRouter(prefix="/settings", tags=["Settings"])


@router.get("", response_model=CompanySettings)
async def get_company_settings(store: SheetsStore = Depends(get_store)):
    return await store.settings.get_company_settings()


@router.put("", response_model=CompanySettings)
async def update_company_settings(
    request: CompanySettingsUpdateSchema,
    store: SheetsStore = Depends(get_store),
    activity: ActivityLogger = Depends(get_activity_logger),
):
    changes = request.changes()
    settings = await store.settings.update_company_settings(changes)
    if changes:
        await activity.log_settings_activity(changes)
    return settings
