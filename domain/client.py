# domain/client.py
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .line_item import generate_id
from .timestamps import now_iso


class ClientCategory(Enum):
    INDIVIDUAL = "individual"
    SMALL_BUSINESS = "small-business"
    ENTERPRISE = "enterprise"
    NON_PROFIT = "non-profit"


@dataclass
class Client:
    name: str
    email: str = ""
    category: ClientCategory = ClientCategory.SMALL_BUSINESS
    phone: Optional[str] = None
    company: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    country: Optional[str] = None
    notes: Optional[str] = None
    vat_number: Optional[str] = None
    physical_address: Optional[str] = None
    postal_address: Optional[str] = None
    id: str = field(default_factory=generate_id)
    created_at: str = field(default_factory=now_iso)
    updated_at: str = field(default_factory=now_iso)

    @property
    def display_name(self) -> str:
        return self.company or self.name
