"""Sheet Table Primitives

Row-level operations on one header-less data range. A table has no index:
every lookup is a full read followed by a linear scan on the ID column.

Row numbers are 1-based sheet rows (row 1 holds the headers, so the first
data row is row 2).
"""

import logging
from typing import Callable, Generic, Iterable, List, Optional, Sequence, Tuple, TypeVar

from src.app.services.sheets_client import SheetsClient
from src.adapter.sheets.codecs import RowCodec
from src.adapter.sheets.retry import RetryExecutor
from src.adapter.sheets.schema import SchemaBootstrapper, column_letter, data_range
from src.domain.base import BaseModel

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=BaseModel)

FIRST_DATA_ROW = 2


class SheetTable(Generic[E]):
    """
    Typed view over one spreadsheet table

    Usage:
        table = SheetTable("Clients", CLIENT_CODEC, client, executor, bootstrapper)
        clients = await table.read_all()
        found = await table.find("18c2f9a0aa01b2c3d4")  # (row_number, client) or None
    """

    def __init__(
        self,
        name: str,
        codec: RowCodec[E],
        client: SheetsClient,
        executor: RetryExecutor,
        bootstrapper: SchemaBootstrapper,
    ):
        self.name = name
        self.codec = codec
        self.client = client
        self.executor = executor
        self.bootstrapper = bootstrapper

    @property
    def data_range(self) -> str:
        return data_range(self.name, self.codec.width)

    def row_range(self, row_number: int) -> str:
        return f"{self.name}!A{row_number}:{column_letter(self.codec.width)}{row_number}"

    async def read_rows(self) -> List[List[str]]:
        """Raw data rows (row 2 onwards), as returned by the remote store"""
        await self.bootstrapper.ensure_initialized()
        return await self.executor.execute(
            lambda: self.client.get_values(self.data_range), f"read_{self.name}"
        )

    async def read_indexed(self) -> List[Tuple[int, E]]:
        """Decoded entities paired with their sheet row numbers; blank rows are skipped"""
        rows = await self.read_rows()
        return [
            (offset + FIRST_DATA_ROW, self.codec.decode(row))
            for offset, row in enumerate(rows)
            if row and str(row[0]).strip()
        ]

    async def read_all(self) -> List[E]:
        return [entity for _, entity in await self.read_indexed()]

    async def find(self, entity_id: str) -> Optional[Tuple[int, E]]:
        rows = await self.read_rows()
        for offset, row in enumerate(rows):
            if row and str(row[0]) == entity_id:
                return offset + FIRST_DATA_ROW, self.codec.decode(row)
        return None

    async def find_where(self, predicate: Callable[[E], bool]) -> List[Tuple[int, E]]:
        return [(row_number, entity) for row_number, entity in await self.read_indexed() if predicate(entity)]

    async def append(self, entities: Sequence[E]) -> None:
        if not entities:
            return
        await self.bootstrapper.ensure_initialized()
        values = [self.codec.encode(entity) for entity in entities]
        await self.executor.execute(
            lambda: self.client.append_values(self.data_range, values),
            f"append_{self.name}",
            retryable_by_default=False,
        )

    async def write_row(self, row_number: int, entity: E) -> None:
        range_ = self.row_range(row_number)
        values = [self.codec.encode(entity)]
        await self.executor.execute(
            lambda: self.client.update_values(range_, values), f"update_{self.name}"
        )

    async def delete_rows(self, row_numbers: Iterable[int]) -> int:
        """
        Remove whole rows in one structural batch request

        Rows are deleted bottom-up so earlier deletions never shift the
        indices of later ones.

        Returns:
            Number of rows removed
        """
        ordered = sorted(set(row_numbers), reverse=True)
        if not ordered:
            return 0
        sheet_id = await self.bootstrapper.sheet_id(self.name)
        requests = [
            {
                "deleteDimension": {
                    "range": {
                        "sheetId": sheet_id,
                        "dimension": "ROWS",
                        "startIndex": row_number - 1,
                        "endIndex": row_number,
                    }
                }
            }
            for row_number in ordered
        ]
        await self.executor.execute(
            lambda: self.client.batch_update(requests),
            f"delete_{self.name}",
            retryable_by_default=False,
        )
        logger.debug(f"Deleted {len(ordered)} row(s) from {self.name}")
        return len(ordered)
