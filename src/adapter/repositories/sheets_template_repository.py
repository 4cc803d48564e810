"""Sheets Template Repository Implementation"""

from collections import defaultdict
from typing import Callable, Dict, List, Optional

from src.adapter.repositories.sheets_base import SheetsEntityRepository, patch_values
from src.adapter.services.cache import TTLCache
from src.adapter.sheets.codecs import OwnedLineItem
from src.adapter.sheets.saga import DeleteSaga
from src.adapter.sheets.table import SheetTable
from src.app.repositories.template_repository import TemplateRepository
from src.domain.base import utcnow
from src.domain.invoice import LineItem
from src.domain.template import Template, TemplateCreate, TemplateUpdate


class SheetsTemplateRepository(SheetsEntityRepository[Template], TemplateRepository):
    """Template store on ``Templates`` with line items in ``TemplateLineItems``"""

    entity_name = "template"

    def __init__(
        self,
        table: SheetTable[Template],
        line_items: SheetTable[OwnedLineItem],
        cache: TTLCache,
        now: Callable = utcnow,
    ):
        super().__init__(table, cache, now)
        self.line_items = line_items

    async def _hydrate(self, templates: List[Template]) -> List[Template]:
        grouped: Dict[str, List[LineItem]] = defaultdict(list)
        for item in await self.line_items.read_all():
            grouped[item.parent_id].append(item.to_line_item())
        for template in templates:
            template.line_items = grouped.get(template.id, [])
        return templates

    async def _delete_items(self, template_id: str) -> int:
        rows = await self.line_items.find_where(lambda item: item.parent_id == template_id)
        return await self.line_items.delete_rows(row_number for row_number, _ in rows)

    async def _append_items(self, template_id: str, items: List[LineItem]) -> None:
        await self.line_items.append(
            [OwnedLineItem.from_line_item(template_id, item) for item in items]
        )

    async def create(self, data: TemplateCreate) -> Template:
        now = self._now()
        template = Template(
            name=data.name,
            description=data.description,
            line_items=[item.to_line_item() for item in data.line_items],
            tax_rate=data.tax_rate,
            notes=data.notes,
            is_active=data.is_active,
            created_at=now,
            updated_at=now,
        )
        await self.table.append([template])
        await self._append_items(template.id, template.line_items)
        self.invalidate()
        return template

    async def update(self, template_id: str, patch: TemplateUpdate) -> Optional[Template]:
        values = patch_values(patch, Template, exclude=("line_items",))
        template = await self._update_row(template_id, lambda template: template.model_copy(update=values))
        if template is None:
            return None

        if "line_items" in patch.model_fields_set and patch.line_items is not None:
            template.line_items = [item.to_line_item() for item in patch.line_items]
            await self._delete_items(template_id)
            await self._append_items(template_id, template.line_items)
            self.invalidate()
        else:
            rows = await self.line_items.find_where(lambda item: item.parent_id == template_id)
            template.line_items = [item.to_line_item() for _, item in rows]
        return template

    async def delete(self, template_id: str) -> bool:
        if await self.table.find(template_id) is None:
            return False
        saga = DeleteSaga(f"delete_template:{template_id}")
        saga.add_step("delete_template_line_items", lambda: self._delete_items(template_id))
        saga.add_step("delete_template", lambda: self._delete_row(template_id))
        try:
            await saga.run()
        finally:
            self.invalidate()
        return True
