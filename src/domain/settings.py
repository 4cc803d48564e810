"""Company Settings Domain Value

Stored as key/value rows in the Settings table.
"""

from decimal import Decimal
from typing import Optional

from pydantic import Field

from src.domain.base import BaseModel
from src.domain.client import Address


class CompanySettings(BaseModel):
    """
    Company Settings - Invoice issuer details and defaults

    Domain Rules:
    - Missing keys fall back to the defaults below
    - payment_terms is a number of days
    """

    name: str = Field(default="Your Company Name", description="Company name")
    email: str = Field(default="contact@yourcompany.com", description="Company email")
    phone: Optional[str] = Field(default=None, description="Company phone")
    address: Address = Field(default_factory=Address, description="Company address")
    tax_rate: Decimal = Field(default=Decimal("10"), description="Default tax percentage")
    payment_terms: int = Field(default=30, description="Days until an invoice is due")
    currency: str = Field(default="USD", description="ISO 4217 currency code")
    invoice_prefix: str = Field(default="INV", description="Invoice number prefix")
    date_format: str = Field(default="YYYY-MM-DD", description="Display date format")
    time_zone: str = Field(default="UTC", description="Display time zone")
