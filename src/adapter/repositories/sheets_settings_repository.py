"""Sheets Settings Repository Implementation

Company settings are a key/value block in the ``Settings`` table. Reads
are cached for the configured settings TTL.
"""

import logging
from typing import Callable

from src.adapter.services.cache import TTLCache
from src.adapter.sheets.codecs import SETTINGS_CODEC
from src.adapter.sheets.retry import RetryExecutor
from src.adapter.sheets.schema import SETTINGS, SchemaBootstrapper, data_range
from src.app.errors import SheetsError
from src.app.repositories.settings_repository import SettingsRepository
from src.app.services.sheets_client import SheetsClient
from src.domain.base import utcnow
from src.domain.settings import CompanySettings

logger = logging.getLogger(__name__)

SETTINGS_KEY = "company_settings"


class SheetsSettingsRepository(SettingsRepository):
    """Company settings store"""

    def __init__(
        self,
        client: SheetsClient,
        executor: RetryExecutor,
        bootstrapper: SchemaBootstrapper,
        cache: TTLCache,
        now: Callable = utcnow,
    ):
        self.client = client
        self.executor = executor
        self.bootstrapper = bootstrapper
        self.cache = cache
        self._now = now
        self._range = data_range(SETTINGS, len(SETTINGS_CODEC.headers))

    async def get_company_settings(self) -> CompanySettings:
        cached = self.cache.get(SETTINGS_KEY)
        if cached is not None:
            return cached
        try:
            await self.bootstrapper.ensure_initialized()
            rows = await self.executor.execute(
                lambda: self.client.get_values(self._range), "get_settings"
            )
        except SheetsError as e:
            logger.error(f"Failed to read company settings, using defaults: {e}")
            return CompanySettings()

        settings = SETTINGS_CODEC.decode(rows)
        self.cache.set(SETTINGS_KEY, settings)
        return settings

    async def update_company_settings(self, patch: dict) -> CompanySettings:
        current = await self.get_company_settings()
        known = {key: value for key, value in patch.items() if key in CompanySettings.model_fields}
        settings = CompanySettings.model_validate({**current.model_dump(), **known})

        rows = SETTINGS_CODEC.encode(settings, self._now())
        await self.bootstrapper.ensure_initialized()
        await self.executor.execute(lambda: self.client.clear_values(self._range), "clear_settings")
        await self.executor.execute(
            lambda: self.client.update_values(f"{SETTINGS}!A2:C{len(rows) + 1}", rows),
            "update_settings",
        )
        self.cache.delete(SETTINGS_KEY)
        logger.info(f"Updated company settings: {', '.join(sorted(known)) or 'no changes'}")
        return settings
