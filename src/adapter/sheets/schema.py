"""Schema Bootstrapper

Makes sure every table the store needs exists in the spreadsheet with the
expected header row. Runs once per process; concurrent callers share the
same in-flight bootstrap.
"""

import asyncio
import logging
from typing import Dict, List, Mapping, Optional

from src.app.errors import NotFoundError
from src.app.services.sheets_client import SheetsClient
from src.adapter.sheets.codecs import (
    ACTIVITY_LOG_CODEC,
    CLIENT_CODEC,
    INVOICE_CODEC,
    LINE_ITEM_CODEC,
    PAYMENT_CODEC,
    PROJECT_CODEC,
    SETTINGS_CODEC,
    TASK_CODEC,
    TEMPLATE_CODEC,
    TEMPLATE_LINE_ITEM_CODEC,
    TIME_ENTRY_CODEC,
)
from src.adapter.sheets.retry import RetryExecutor
from src.domain.settings import CompanySettings

logger = logging.getLogger(__name__)

CLIENTS = "Clients"
INVOICES = "Invoices"
LINE_ITEMS = "LineItems"
PAYMENTS = "Payments"
TEMPLATES = "Templates"
TEMPLATE_LINE_ITEMS = "TemplateLineItems"
PROJECTS = "Projects"
TASKS = "Tasks"
TIME_ENTRIES = "TimeEntries"
ACTIVITY_LOGS = "ActivityLogs"
SETTINGS = "Settings"

TABLE_HEADERS: Dict[str, List[str]] = {
    CLIENTS: CLIENT_CODEC.headers,
    INVOICES: INVOICE_CODEC.headers,
    LINE_ITEMS: LINE_ITEM_CODEC.headers,
    PAYMENTS: PAYMENT_CODEC.headers,
    TEMPLATES: TEMPLATE_CODEC.headers,
    TEMPLATE_LINE_ITEMS: TEMPLATE_LINE_ITEM_CODEC.headers,
    PROJECTS: PROJECT_CODEC.headers,
    TASKS: TASK_CODEC.headers,
    TIME_ENTRIES: TIME_ENTRY_CODEC.headers,
    ACTIVITY_LOGS: ACTIVITY_LOG_CODEC.headers,
    SETTINGS: SETTINGS_CODEC.headers,
}


def column_letter(index: int) -> str:
    """1-based column index to A1 letters (1 -> A, 27 -> AA)"""
    letters = ""
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        letters = chr(ord("A") + remainder) + letters
    return letters


def header_range(table: str, width: int) -> str:
    return f"{table}!A1:{column_letter(width)}1"


def data_range(table: str, width: int) -> str:
    return f"{table}!A2:{column_letter(width)}"


class SchemaBootstrapper:
    """
    One-time table/header initialization

    Usage:
        bootstrapper = SchemaBootstrapper(client, executor)
        await bootstrapper.ensure_initialized()
        sheet_id = await bootstrapper.sheet_id("Invoices")
    """

    def __init__(
        self,
        client: SheetsClient,
        executor: RetryExecutor,
        tables: Optional[Mapping[str, List[str]]] = None,
    ):
        self.client = client
        self.executor = executor
        self.tables = dict(tables or TABLE_HEADERS)
        self._sheet_ids: Dict[str, int] = {}
        self._task: Optional[asyncio.Task] = None

    @property
    def is_initialized(self) -> bool:
        task = self._task
        return task is not None and task.done() and not task.cancelled() and task.exception() is None

    async def ensure_initialized(self) -> None:
        """
        Bootstrap the spreadsheet if this process has not done so yet

        Raises:
            SheetsError: When the bootstrap failed; the memo is cleared so
                the next call tries again
        """
        if self._task is None:
            self._task = asyncio.ensure_future(self._bootstrap())
        task = self._task
        try:
            await asyncio.shield(task)
        except asyncio.CancelledError:
            if task.cancelled() and self._task is task:
                self._task = None
            raise
        except Exception:
            if self._task is task:
                self._task = None
            raise

    def reset(self) -> None:
        """Forget the bootstrap result so the next call runs it again"""
        self._task = None
        self._sheet_ids.clear()

    async def sheet_id(self, title: str) -> int:
        """Numeric sheet id of a table (needed by row-delete requests)"""
        await self.ensure_initialized()
        if title not in self._sheet_ids:
            raise NotFoundError(f"Sheet {title} not found", operation="sheet_id")
        return self._sheet_ids[title]

    async def _bootstrap(self) -> None:
        logger.info("Bootstrapping spreadsheet schema")
        metadata = await self.executor.execute(self.client.get_spreadsheet, "get_spreadsheet")
        self._sheet_ids = {
            sheet["properties"]["title"]: sheet["properties"].get("sheetId", 0)
            for sheet in metadata.get("sheets", [])
        }

        missing = [title for title in self.tables if title not in self._sheet_ids]
        if missing:
            await self._create_tables(missing)

        for title, headers in self.tables.items():
            await self._ensure_headers(title, headers)

        if SETTINGS in missing and SETTINGS in self.tables:
            await self._seed_settings()

        logger.info(f"Spreadsheet schema ready ({len(self.tables)} tables, {len(missing)} created)")

    async def _create_tables(self, titles: List[str]) -> None:
        logger.info(f"Creating missing tables: {', '.join(titles)}")
        requests = [{"addSheet": {"properties": {"title": title}}} for title in titles]
        response = await self.executor.execute(
            lambda: self.client.batch_update(requests), "create_sheets"
        )
        for reply in response.get("replies", []):
            properties = reply.get("addSheet", {}).get("properties", {})
            if "title" in properties:
                self._sheet_ids[properties["title"]] = properties.get("sheetId", 0)

    async def _ensure_headers(self, title: str, headers: List[str]) -> None:
        range_ = header_range(title, len(headers))
        rows = await self.executor.execute(
            lambda: self.client.get_values(range_), f"get_headers_{title}"
        )
        current = rows[0] if rows else []
        if current == headers:
            return
        if current:
            logger.warning(f"Header mismatch in {title}: expected {headers}, found {current}; rewriting")
        else:
            logger.info(f"Writing headers for {title}")
        await self.executor.execute(
            lambda: self.client.update_values(range_, [headers]), f"set_headers_{title}"
        )

    async def _seed_settings(self) -> None:
        rows = SETTINGS_CODEC.encode(CompanySettings())
        await self.executor.execute(
            lambda: self.client.append_values(data_range(SETTINGS, len(SETTINGS_CODEC.headers)), rows),
            "seed_settings",
        )
        logger.info(f"Seeded {len(rows)} default settings")
