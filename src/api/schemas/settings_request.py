"""Company settings request schemas"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from src.domain.client import Address


class CompanySettingsUpdateSchema(BaseModel):
    """
    Request schema for updating company settings

    Only the fields present in the request body are changed.
    """

    name: Optional[str] = Field(default=None, min_length=1, description="Company name")
    email: Optional[str] = Field(default=None, description="Company email")
    phone: Optional[str] = Field(default=None, description="Company phone")
    address: Optional[Address] = Field(default=None, description="Company address")
    tax_rate: Optional[Decimal] = Field(default=None, ge=0, description="Default tax percentage")
    payment_terms: Optional[int] = Field(default=None, ge=0, description="Days until an invoice is due")
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3, description="ISO 4217 code")
    invoice_prefix: Optional[str] = Field(default=None, min_length=1, description="Invoice number prefix")
    date_format: Optional[str] = Field(default=None, description="Display date format")
    time_zone: Optional[str] = Field(default=None, description="Display time zone")

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Acme Studio",
                "tax_rate": "8.5",
                "payment_terms": 14,
                "currency": "EUR",
            }
        }

    def changes(self) -> dict:
        return {name: getattr(self, name) for name in self.model_fields_set}
