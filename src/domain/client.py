"""Client Domain Entity

Billing contact that invoices and projects belong to.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from src.domain.base import BaseModel, generate_id, utcnow


class Address(BaseModel):
    street: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    country: str = ""


class Client(BaseModel):
    """
    Client - Customer being billed

    Domain Rules:
    - id is unique within the Clients table
    - phone is optional; blank cells decode to None
    """

    id: str = Field(default_factory=generate_id, description="Client identifier")
    name: str = Field(default="", description="Client display name")
    email: str = Field(default="", description="Billing email address")
    phone: Optional[str] = Field(default=None, description="Optional phone number")
    address: Address = Field(default_factory=Address, description="Postal address")
    created_at: datetime = Field(default_factory=utcnow, description="Creation timestamp")
    updated_at: datetime = Field(default_factory=utcnow, description="Last update timestamp")


class ClientCreate(BaseModel):
    name: str
    email: str
    phone: Optional[str] = None
    address: Address = Field(default_factory=Address)


class ClientUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[Address] = None
