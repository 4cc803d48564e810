"""Template Repository Interface"""

from typing import List

from src.app.repositories.base import EntityRepository
from src.domain.template import Template, TemplateCreate, TemplateUpdate


class TemplateRepository(EntityRepository[Template, TemplateCreate, TemplateUpdate]):
    """Repository interface for invoice templates (line items attached)"""

    async def list_active(self) -> List[Template]:
        return [template for template in await self.list() if template.is_active]
