from datetime import datetime, timezone

import pytest
import pytest_asyncio

from src.adapter.repositories.store import SheetsStore
from src.adapter.sheets.retry import RateLimiter, RetryConfig, RetryExecutor
from tests.fakes import FakeSheetsClient

FIXED_NOW = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


async def no_sleep(seconds: float) -> None:
    return None


@pytest.fixture
def fake_client():
    """Empty in-memory spreadsheet"""
    return FakeSheetsClient()


@pytest.fixture
def fast_executor():
    """Retry executor that never actually sleeps"""
    return RetryExecutor(
        RetryConfig(request_timeout=None),
        RateLimiter(min_interval=0.0, sleep=no_sleep),
        sleep=no_sleep,
    )


@pytest.fixture
def now():
    return FIXED_NOW


@pytest_asyncio.fixture
async def store(fake_client, fast_executor, now):
    """Bootstrapped store over the fake spreadsheet with a fixed clock"""
    sheets_store = SheetsStore(fake_client, executor=fast_executor, now=lambda: now)
    await sheets_store.initialize()
    yield sheets_store
    await sheets_store.close()
