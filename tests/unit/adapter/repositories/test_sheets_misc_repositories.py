from datetime import timedelta
from decimal import Decimal

import pytest

from src.adapter.repositories.sheets_activity_log_repository import SheetsActivityLogRepository
from src.adapter.services.cache import TTLCache
from src.adapter.sheets.schema import CLIENTS, SETTINGS, TEMPLATE_LINE_ITEMS
from src.app.errors import AuthenticationError, ValidationError
from src.domain.activity_log import ActivityLogCreate, ActivityLogFilters
from src.domain.client import Address, ClientCreate, ClientUpdate
from src.domain.invoice import LineItemInput
from src.domain.template import TemplateCreate, TemplateUpdate
from tests.fakes import http_error


@pytest.mark.asyncio
class TestSheetsClientRepository:

    async def test_create_update_delete(self, store, fake_client, now):
        # Arrange
        client = await store.clients.create(
            ClientCreate(name="Acme", email="billing@acme.test", address=Address(city="Springfield"))
        )

        # Act
        updated = await store.clients.update(client.id, ClientUpdate(phone="555-0100"))

        # Assert
        assert updated.phone == "555-0100"
        assert updated.name == "Acme"
        assert updated.address.city == "Springfield"
        assert (await store.clients.get(client.id)).phone == "555-0100"
        assert await store.clients.delete(client.id) is True
        assert fake_client.data_rows(CLIENTS) == []

    async def test_update_strict_raises_for_missing_client(self, store):
        assert await store.clients.update("missing", ClientUpdate(name="x")) is None
        with pytest.raises(ValidationError):
            await store.clients.update_strict("missing", ClientUpdate(name="x"))

    async def test_list_is_cached_until_a_write(self, store, fake_client):
        await store.clients.create(ClientCreate(name="A", email="a@example.test"))
        await store.clients.list()
        reads = fake_client.count("get_values")

        await store.clients.list()
        assert fake_client.count("get_values") == reads

        await store.clients.create(ClientCreate(name="B", email="b@example.test"))
        assert len(await store.clients.list()) == 2

    async def test_list_failure_returns_empty(self, store, fake_client):
        fake_client.fail_next("get_values", http_error(401, "Unauthorized"))

        assert await store.clients.list() == []

    async def test_get_failure_propagates(self, store, fake_client):
        fake_client.fail_next("get_values", http_error(401, "Unauthorized"))

        with pytest.raises(AuthenticationError):
            await store.clients.get("anything")


@pytest.mark.asyncio
class TestSheetsTemplateRepository:

    async def test_line_items_round_trip_and_active_filter(self, store):
        # Arrange
        active = await store.templates.create(
            TemplateCreate(
                name="Retainer",
                tax_rate=Decimal("10"),
                line_items=[LineItemInput(description="Support", quantity=Decimal("10"), rate=Decimal("90"))],
            )
        )
        await store.templates.create(TemplateCreate(name="Old", is_active=False))

        # Act
        listed = await store.templates.list_active()

        # Assert
        assert [t.id for t in listed] == [active.id]
        assert listed[0].line_items[0].amount == Decimal("900")

    async def test_update_replaces_items(self, store, fake_client):
        template = await store.templates.create(
            TemplateCreate(name="Retainer", line_items=[LineItemInput(description="Support")])
        )

        updated = await store.templates.update(
            template.id, TemplateUpdate(line_items=[LineItemInput(description="Hosting"), LineItemInput(description="DNS")])
        )

        assert [item.description for item in updated.line_items] == ["Hosting", "DNS"]
        assert [row[2] for row in fake_client.data_rows(TEMPLATE_LINE_ITEMS)] == ["Hosting", "DNS"]
        renamed = await store.templates.update(template.id, TemplateUpdate(name="Care plan"))
        assert len(renamed.line_items) == 2

    async def test_delete_removes_items(self, store, fake_client):
        template = await store.templates.create(
            TemplateCreate(name="Retainer", line_items=[LineItemInput(description="Support")])
        )

        assert await store.templates.delete(template.id) is True
        assert fake_client.data_rows(TEMPLATE_LINE_ITEMS) == []
        assert await store.templates.delete(template.id) is False


@pytest.mark.asyncio
class TestSheetsActivityLogRepository:
    """Filtering, newest-first ordering and pagination"""

    @pytest.fixture
    def clock(self, now):
        class Clock:
            def __init__(self):
                self.value = now

            def __call__(self):
                return self.value

        return Clock()

    @pytest.fixture
    def repo(self, store, clock):
        return SheetsActivityLogRepository(store.activity_logs.table, TTLCache(), now=clock)

    async def _log(self, repo, clock, minutes, **fields):
        clock.value = clock.value + timedelta(minutes=minutes)
        values = dict(type="client_added", description="Client added", entity_type="client", entity_id="c1")
        values.update(fields)
        return await repo.create(ActivityLogCreate(**values))

    async def test_query_filters_sorts_and_pages(self, repo, clock):
        # Arrange
        first = await self._log(repo, clock, 1, entity_name="Acme")
        second = await self._log(repo, clock, 1, type="invoice_created", entity_type="invoice", entity_id="i1")
        third = await self._log(repo, clock, 1, entity_name="Globex", user_email="ops@example.test")

        # Act
        everything = await repo.query(ActivityLogFilters(), page=1, limit=2)
        page_two = await repo.query(ActivityLogFilters(), page=2, limit=2)
        clients_only = await repo.query(ActivityLogFilters(entity_type="client"))
        searched = await repo.query(ActivityLogFilters(search="OPS@"))
        ranged = await repo.query(
            ActivityLogFilters(date_from=second.timestamp, date_to=second.timestamp)
        )

        # Assert
        assert [log.id for log in everything.logs] == [third.id, second.id]
        assert everything.total == 3
        assert everything.has_more is True
        assert [log.id for log in page_two.logs] == [first.id]
        assert page_two.has_more is False
        assert [log.id for log in clients_only.logs] == [third.id, first.id]
        assert [log.id for log in searched.logs] == [third.id]
        assert [log.id for log in ranged.logs] == [second.id]

    async def test_page_and_limit_are_clamped(self, repo, clock):
        await self._log(repo, clock, 1)

        page = await repo.query(ActivityLogFilters(), page=0, limit=0)

        assert (page.page, page.limit, page.total) == (1, 1, 1)


@pytest.mark.asyncio
class TestSheetsSettingsRepository:

    async def test_defaults_are_seeded(self, store):
        settings = await store.settings.get_company_settings()

        assert settings.name == "Your Company Name"
        assert settings.tax_rate == Decimal("10")
        assert settings.payment_terms == 30
        assert settings.currency == "USD"

    async def test_update_rewrites_block_and_ignores_unknown_keys(self, store, fake_client, now):
        # Act
        updated = await store.settings.update_company_settings(
            {"name": "Studio", "tax_rate": Decimal("7.5"), "favourite_color": "teal"}
        )

        # Assert
        assert updated.name == "Studio"
        rows = fake_client.data_rows(SETTINGS)
        assert ["company_name", "Studio", now.isoformat()] in rows
        assert len(rows) == 14
        reread = await store.settings.get_company_settings()
        assert reread.tax_rate == Decimal("7.5")
        assert reread.currency == "USD"

    async def test_read_failure_falls_back_to_defaults(self, store, fake_client):
        fake_client.fail_next("get_values", http_error(401, "Unauthorized"))

        settings = await store.settings.get_company_settings()

        assert settings.name == "Your Company Name"


@pytest.mark.asyncio
class TestSheetsStore:

    async def test_health_reports_tables(self, store):
        health = await store.health()

        assert health["connected"] is True
        assert health["missing_tables"] == []
        assert "Invoices" in health["tables"]

    async def test_close_closes_client(self, store, fake_client):
        await store.close()

        assert fake_client.closed is True
