from typing import Optional

from fastapi import Depends, Header, Request

from config import ApplicationConfig
from src.adapter.repositories.store import SheetsStore
from src.app.services.activity_logger import ActivityLogger

_store: Optional[SheetsStore] = None


def get_store() -> SheetsStore:
    global _store
    if _store is None:
        _store = SheetsStore.from_config(ApplicationConfig)
    return _store


async def close_store() -> None:
    global _store
    if _store is not None:
        await _store.close()
        _store = None


def get_activity_logger(
    request: Request,
    store: SheetsStore = Depends(get_store),
    x_user_id: Optional[str] = Header(default=None),
    x_user_email: Optional[str] = Header(default=None),
) -> ActivityLogger:
    return ActivityLogger(
        store.activity_logs,
        user_id=x_user_id,
        user_email=x_user_email,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )
