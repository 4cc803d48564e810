"""Spreadsheet Maintenance Routes

Bootstrap and connectivity checks for the spreadsheet store.
"""

from fastapi import APIRouter, Depends

from src.adapter.repositories.store import SheetsStore
from src.depends import get_store

router = APIRouter(prefix="/sheets", tags=["Sheets"])


@router.post("/initialize")
async def initialize_sheets(force: bool = False, store: SheetsStore = Depends(get_store)):
    """
    Create missing tables and repair header rows.

    **Query parameters:**
    - `force` (optional): Run the bootstrap again even if it already ran in this process
    """
    if force:
        store.bootstrapper.reset()
    await store.initialize()
    return {"initialized": True, "tables": list(store.bootstrapper.tables)}


@router.get("/health")
async def sheets_health(store: SheetsStore = Depends(get_store)):
    """Check that the spreadsheet is reachable and report missing tables"""
    return await store.health()
