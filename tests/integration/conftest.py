import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from src.depends import get_store


@pytest_asyncio.fixture
async def client(store):
    """Test client with the store dependency pointed at the in-memory spreadsheet"""
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)
    app.dependency_overrides[get_store] = lambda: store

    # Use ASGITransport for httpx AsyncClient
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
