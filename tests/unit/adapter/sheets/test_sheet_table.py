import pytest

from src.adapter.sheets.codecs import CLIENT_CODEC
from src.adapter.sheets.schema import CLIENTS, SchemaBootstrapper
from src.adapter.sheets.table import SheetTable
from src.domain.client import Client


@pytest.mark.asyncio
class TestSheetTable:
    """Row-level reads, appends, in-place writes and batched deletes"""

    @pytest.fixture
    def table(self, fake_client, fast_executor):
        bootstrapper = SchemaBootstrapper(fake_client, fast_executor)
        return SheetTable(CLIENTS, CLIENT_CODEC, fake_client, fast_executor, bootstrapper)

    async def test_append_then_find_returns_sheet_row_number(self, table):
        # Arrange
        clients = [Client(name=f"Client {i}", email=f"c{i}@example.test") for i in range(3)]

        # Act
        await table.append(clients)
        found = await table.find(clients[2].id)

        # Assert
        assert found is not None
        row_number, client = found
        assert row_number == 4  # header is row 1
        assert client.name == "Client 2"
        assert await table.find("missing") is None

    async def test_blank_rows_are_skipped(self, table, fake_client):
        client = Client(name="Acme", email="a@example.test")
        await table.append([client])
        fake_client.sheets[CLIENTS].insert(1, [""] * CLIENT_CODEC.width)

        indexed = await table.read_indexed()

        assert [(row, c.id) for row, c in indexed] == [(3, client.id)]

    async def test_write_row_overwrites_only_that_row(self, table, fake_client):
        first = Client(name="First", email="f@example.test")
        second = Client(name="Second", email="s@example.test")
        await table.append([first, second])

        second.name = "Second (renamed)"
        await table.write_row(3, second)

        assert [c.name for c in await table.read_all()] == ["First", "Second (renamed)"]
        assert ("update_values", "Clients!A3:K3") in fake_client.calls

    async def test_delete_rows_issues_one_bottom_up_batch(self, table, fake_client):
        # Arrange
        clients = [Client(name=f"Client {i}", email=f"c{i}@example.test") for i in range(4)]
        await table.append(clients)

        # Act
        deleted = await table.delete_rows([2, 4, 4])

        # Assert
        assert deleted == 2
        requests = fake_client.batch_requests[-1]
        assert [r["deleteDimension"]["range"]["startIndex"] for r in requests] == [3, 1]
        assert [c.name for c in await table.read_all()] == ["Client 1", "Client 3"]

    async def test_delete_nothing_makes_no_request(self, table, fake_client):
        await table.read_all()
        batches = len(fake_client.batch_requests)

        assert await table.delete_rows([]) == 0
        assert len(fake_client.batch_requests) == batches

    async def test_append_empty_is_noop(self, table, fake_client):
        await table.append([])

        assert fake_client.count("append_values") == 0
