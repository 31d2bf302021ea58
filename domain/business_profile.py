# domain/business_profile.py
from dataclasses import dataclass, field
from typing import Optional

from .line_item import generate_id
from .timestamps import now_iso


@dataclass
class BusinessProfile:
    company_name: str
    email: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    country: str = ""
    logo: Optional[str] = None  # Base64 PNG
    bank_name: Optional[str] = None
    account_number: Optional[str] = None
    account_type: Optional[str] = None
    routing_number: Optional[str] = None
    tax_id: Optional[str] = None
    vat_number: Optional[str] = None
    company_registration: Optional[str] = None
    postal_address: Optional[str] = None
    physical_address: Optional[str] = None
    sales_rep: Optional[str] = None
    default_currency: str = "ZAR"
    invoice_prefix: str = "INV"
    invoice_number_start: int = 1000
    id: str = field(default_factory=generate_id)
    created_at: str = field(default_factory=now_iso)
    updated_at: str = field(default_factory=now_iso)
