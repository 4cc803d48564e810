"""Shared Sheets Repository Behaviour

Caching, full-table reads and locate-then-write row updates used by every
entity store.
"""

import logging
from typing import Callable, Generic, List, Optional, Type, TypeVar, get_args

from src.adapter.services.cache import TTLCache
from src.adapter.sheets.table import SheetTable
from src.app.errors import SheetsError
from src.domain.base import BaseModel, utcnow

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=BaseModel)

ALL_KEY = "all"
DERIVED_PREFIX = "by_"


def _accepts_none(model: Type[BaseModel], name: str) -> bool:
    field = model.model_fields.get(name)
    if field is None:
        return True
    return field.annotation is type(None) or type(None) in get_args(field.annotation)


def patch_values(patch: BaseModel, target: Optional[Type[BaseModel]] = None, exclude: tuple = ()) -> dict:
    """
    Fields the caller explicitly set on a partial update model

    An explicit null for a field that ``target`` declares non-optional is
    dropped, leaving the stored value unchanged.
    """
    values = {}
    for name in patch.model_fields_set:
        if name in exclude:
            continue
        value = getattr(patch, name)
        if value is None and target is not None and not _accepts_none(target, name):
            continue
        values[name] = value
    return values


class SheetsEntityRepository(Generic[E]):
    """
    Base for spreadsheet-backed repositories

    Reads go through the collection cache under ``all`` (and ``by_*`` keys
    for filtered views); every write drops all of them.
    """

    entity_name = "entity"

    def __init__(self, table: SheetTable[E], cache: TTLCache, now: Callable = utcnow):
        self.table = table
        self.cache = cache
        self._now = now

    def invalidate(self) -> None:
        self.cache.delete(ALL_KEY)
        self.cache.delete_prefix(DERIVED_PREFIX)

    async def _hydrate(self, entities: List[E]) -> List[E]:
        return entities

    async def load_all(self) -> List[E]:
        """Every entity, from cache when fresh; remote failures propagate"""
        cached = self.cache.get(ALL_KEY)
        if cached is not None:
            return list(cached)
        entities = await self._hydrate(await self.table.read_all())
        self.cache.set(ALL_KEY, entities)
        return list(entities)

    async def find_all(self, predicate: Callable[[E], bool]) -> List[E]:
        return [entity for entity in await self.load_all() if predicate(entity)]

    async def list(self) -> List[E]:
        try:
            return await self.load_all()
        except SheetsError as e:
            logger.error(f"Failed to list {self.entity_name} records: {e}")
            return []

    async def _list_cached(self, key: str, predicate: Callable[[E], bool]) -> List[E]:
        cached = self.cache.get(key)
        if cached is not None:
            return list(cached)
        try:
            entities = await self.find_all(predicate)
        except SheetsError as e:
            logger.error(f"Failed to list {self.entity_name} records ({key}): {e}")
            return []
        self.cache.set(key, entities)
        return list(entities)

    async def get(self, entity_id: str) -> Optional[E]:
        for entity in await self.load_all():
            if entity.id == entity_id:
                return entity
        return None

    async def _update_row(self, entity_id: str, mutate: Callable[[E], Optional[E]]) -> Optional[E]:
        """
        Locate a row by id, apply ``mutate`` and overwrite exactly that row

        Args:
            entity_id: Entity identifier
            mutate: Receives the decoded entity; returning None aborts the write

        Returns:
            The written entity, or None if absent or aborted
        """
        found = await self.table.find(entity_id)
        if found is None:
            return None
        row_number, current = found
        updated = mutate(current)
        if updated is None:
            return None
        if "updated_at" in type(updated).model_fields:
            updated.updated_at = self._now()
        await self.table.write_row(row_number, updated)
        self.invalidate()
        return updated

    async def _delete_row(self, entity_id: str) -> bool:
        found = await self.table.find(entity_id)
        if found is None:
            return False
        await self.table.delete_rows([found[0]])
        self.invalidate()
        return True
