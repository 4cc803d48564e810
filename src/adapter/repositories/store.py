"""Sheets Store Facade

Wires the remote client, rate limiter, retry executor, schema bootstrapper,
per-collection caches and repositories into one object.
"""

import logging
from typing import Callable, Optional

from src.adapter.repositories.sheets_activity_log_repository import SheetsActivityLogRepository
from src.adapter.repositories.sheets_client_repository import SheetsClientRepository
from src.adapter.repositories.sheets_invoice_repository import SheetsInvoiceRepository
from src.adapter.repositories.sheets_payment_repository import SheetsPaymentRepository
from src.adapter.repositories.sheets_project_repository import SheetsProjectRepository
from src.adapter.repositories.sheets_settings_repository import SheetsSettingsRepository
from src.adapter.repositories.sheets_task_repository import SheetsTaskRepository
from src.adapter.repositories.sheets_template_repository import SheetsTemplateRepository
from src.adapter.repositories.sheets_time_entry_repository import SheetsTimeEntryRepository
from src.adapter.services.cache import TTLCache
from src.adapter.sheets import codecs, schema
from src.adapter.sheets.client import HttpxSheetsClient
from src.adapter.sheets.retry import RateLimiter, RetryConfig, RetryExecutor
from src.adapter.sheets.schema import SchemaBootstrapper
from src.adapter.sheets.table import SheetTable
from src.app.services.sheets_client import SheetsClient
from src.domain.base import utcnow

logger = logging.getLogger(__name__)


class SheetsStore:
    """
    Entry point to the spreadsheet-backed data engine

    Usage:
        store = SheetsStore.from_config(ApplicationConfig)
        await store.initialize()
        invoices = await store.invoices.list()
        await store.close()
    """

    def __init__(
        self,
        client: SheetsClient,
        executor: Optional[RetryExecutor] = None,
        config=None,
        now: Callable = utcnow,
    ):
        self.client = client
        self.executor = executor or RetryExecutor(
            RetryConfig.from_config(config) if config is not None else RetryConfig(),
            RateLimiter(config.SHEETS_MIN_REQUEST_INTERVAL if config is not None else 0.1),
        )
        self.bootstrapper = SchemaBootstrapper(client, self.executor)

        ttl = _CacheTTLs(config)

        def table(name, codec):
            return SheetTable(name, codec, client, self.executor, self.bootstrapper)

        self.clients = SheetsClientRepository(
            table(schema.CLIENTS, codecs.CLIENT_CODEC), ttl.cache(ttl.default), now
        )
        self.invoices = SheetsInvoiceRepository(
            table(schema.INVOICES, codecs.INVOICE_CODEC),
            table(schema.LINE_ITEMS, codecs.LINE_ITEM_CODEC),
            ttl.cache(ttl.invoices),
            invoice_prefix=getattr(config, "INVOICE_PREFIX", "INV"),
            due_days=getattr(config, "INVOICE_DUE_DAYS", 30),
            now=now,
        )
        self.payments = SheetsPaymentRepository(
            table(schema.PAYMENTS, codecs.PAYMENT_CODEC), ttl.cache(ttl.payments), self.invoices, now
        )
        self.templates = SheetsTemplateRepository(
            table(schema.TEMPLATES, codecs.TEMPLATE_CODEC),
            table(schema.TEMPLATE_LINE_ITEMS, codecs.TEMPLATE_LINE_ITEM_CODEC),
            ttl.cache(ttl.templates),
            now,
        )
        self.tasks = SheetsTaskRepository(
            table(schema.TASKS, codecs.TASK_CODEC), ttl.cache(ttl.default), now=now
        )
        self.time_entries = SheetsTimeEntryRepository(
            table(schema.TIME_ENTRIES, codecs.TIME_ENTRY_CODEC), ttl.cache(ttl.default), self.tasks, now
        )
        self.tasks.time_entries = self.time_entries
        self.projects = SheetsProjectRepository(
            table(schema.PROJECTS, codecs.PROJECT_CODEC),
            ttl.cache(ttl.default),
            self.tasks,
            self.time_entries,
            now,
        )
        self.activity_logs = SheetsActivityLogRepository(
            table(schema.ACTIVITY_LOGS, codecs.ACTIVITY_LOG_CODEC), ttl.cache(ttl.default), now
        )
        self.settings = SheetsSettingsRepository(
            client, self.executor, self.bootstrapper, ttl.cache(ttl.settings), now
        )

    @classmethod
    def from_config(cls, config) -> "SheetsStore":
        client = HttpxSheetsClient(
            spreadsheet_id=config.SPREADSHEET_ID,
            access_token=config.SHEETS_ACCESS_TOKEN,
            base_url=config.SHEETS_API_BASE_URL,
            timeout=config.SHEETS_REQUEST_TIMEOUT,
        )
        return cls(client, config=config)

    async def initialize(self) -> None:
        """Create missing tables and repair header rows (once per process)"""
        await self.bootstrapper.ensure_initialized()

    async def health(self) -> dict:
        """Round-trip to the remote store; raises a classified error when unreachable"""
        metadata = await self.executor.execute(
            self.client.get_spreadsheet, "health_check", retryable_by_default=False
        )
        titles = [sheet["properties"]["title"] for sheet in metadata.get("sheets", [])]
        missing = [title for title in self.bootstrapper.tables if title not in titles]
        return {"connected": True, "tables": titles, "missing_tables": missing}

    async def close(self) -> None:
        await self.client.close()
        logger.debug("Sheets store closed")


class _CacheTTLs:
    """Cache TTLs and size from config, with the built-in defaults as fallback"""

    def __init__(self, config=None):
        self.settings = getattr(config, "CACHE_TTL_SETTINGS", 30 * 60)
        self.templates = getattr(config, "CACHE_TTL_TEMPLATES", 15 * 60)
        self.invoices = getattr(config, "CACHE_TTL_INVOICES", 5 * 60)
        self.payments = getattr(config, "CACHE_TTL_PAYMENTS", 5 * 60)
        self.default = getattr(config, "CACHE_TTL_DEFAULT", 2 * 60)
        self.max_size = getattr(config, "CACHE_MAX_SIZE", 100)

    def cache(self, ttl: float) -> TTLCache:
        return TTLCache(default_ttl=ttl, max_size=self.max_size)
