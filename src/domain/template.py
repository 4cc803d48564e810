"""Template Domain Entity

Reusable invoice skeleton (line items and tax rate, no client or dates).
"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from src.domain.base import BaseModel, generate_id, utcnow
from src.domain.invoice import LineItem, LineItemInput


class Template(BaseModel):
    """
    Template - Invoice blueprint

    Domain Rules:
    - Line items are stored in the TemplateLineItems table keyed by template id
    - Deleting a template deletes its line items first
    """

    id: str = Field(default_factory=generate_id, description="Template identifier")
    name: str = Field(default="", description="Template name")
    description: Optional[str] = Field(default=None, description="What the template is for")
    line_items: List[LineItem] = Field(default_factory=list, description="Default line items")
    tax_rate: Decimal = Field(default=Decimal("0"), description="Default tax percentage")
    notes: Optional[str] = Field(default=None, description="Default invoice notes")
    is_active: bool = Field(default=True, description="Inactive templates are hidden from pickers")
    created_at: datetime = Field(default_factory=utcnow, description="Creation timestamp")
    updated_at: datetime = Field(default_factory=utcnow, description="Last update timestamp")


class TemplateCreate(BaseModel):
    name: str
    description: Optional[str] = None
    line_items: List[LineItemInput] = Field(default_factory=list)
    tax_rate: Decimal = Decimal("0")
    notes: Optional[str] = None
    is_active: bool = True


class TemplateUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    line_items: Optional[List[LineItemInput]] = None
    tax_rate: Optional[Decimal] = None
    notes: Optional[str] = None
    is_active: Optional[bool] = None
