# domain/document.py
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .business_profile import BusinessProfile
from .calculator import Calculator, DiscountSpec, DocumentTotals
from .client import Client
from .errors import InvalidDocumentError
from .line_item import LineItem, generate_id
from .pricing import AIRecommendation, TeamMember
from .timestamps import now_iso

DEFAULT_PAYMENT_TERMS = "50% deposit payable before work can commence."
DEFAULT_TAX_RATE = 15.0


class DocumentType(Enum):
    QUOTATION = "quotation"
    INVOICE = "invoice"


class DocumentStatus(Enum):
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    CANCELLED = "cancelled"


@dataclass
class Document:
    type: DocumentType
    document_number: str
    client: Client
    business_profile: BusinessProfile
    line_items: List[LineItem] = field(default_factory=list)
    discount: DiscountSpec = field(default_factory=DiscountSpec)
    tax_rate: float = DEFAULT_TAX_RATE
    currency: str = "ZAR"
    status: DocumentStatus = DocumentStatus.DRAFT
    reference: Optional[str] = None
    sales_rep: Optional[str] = None
    notes: Optional[str] = None
    terms: Optional[str] = None
    payment_terms: Optional[str] = DEFAULT_PAYMENT_TERMS
    due_date: Optional[str] = None
    issue_date: str = field(default_factory=lambda: now_iso()[:10])
    ai_recommendation: Optional[AIRecommendation] = None
    team_members: List[TeamMember] = field(default_factory=list)
    id: str = field(default_factory=generate_id)
    created_at: str = field(default_factory=now_iso)
    updated_at: str = field(default_factory=now_iso)

    @property
    def client_id(self) -> str:
        return self.client.id

    @property
    def title(self) -> str:
        return "INVOICE" if self.type == DocumentType.INVOICE else "QUOTE"

    def totals(self) -> DocumentTotals:
        """Recomputed from the stored inputs on every call."""
        return Calculator.compute_totals(self.line_items, self.discount, self.tax_rate)

    def validate(self):
        """Reject amounts the totals engine would accept but a document must not carry."""
        for item in self.line_items:
            if item.quantity < 0 or item.unit_price < 0:
                raise InvalidDocumentError(f"Line item '{item.description}' has a negative quantity or price")
        if self.discount.amount < 0:
            raise InvalidDocumentError("Discount cannot be negative")
        if self.tax_rate < 0:
            raise InvalidDocumentError("Tax rate cannot be negative")
        totals = self.totals()
        if totals.discount_amount > totals.subtotal:
            raise InvalidDocumentError("Discount cannot exceed the subtotal")
