# core/document_editor.py
from dataclasses import replace
from typing import List, Optional

from domain.calculator import DiscountSpec, DiscountType, DocumentTotals, Calculator
from domain.document import DEFAULT_PAYMENT_TERMS, DEFAULT_TAX_RATE, Document, DocumentStatus, DocumentType
from domain.errors import InputIncompleteError
from domain.line_item import LineItem, generate_id
from domain.pricing import AIRecommendation, TeamMember, calculate_team_compensation
from domain.rate_preset import RatePreset
from domain.timestamps import now_iso
from infrastructure.logging_service import get_module_logger

logger = get_module_logger("DocumentEditor", "document_editor.log")

MSG_NO_PROFILE = "Please set up your business profile first"
MSG_NO_CLIENT = "Please select a client"
MSG_NO_ITEMS = "Please add at least one line item"


class DocumentEditor:
    """
    Working copy of one quotation or invoice.

    Line item edits keep each row total equal to quantity x unit price, and
    `totals` is derived from the current inputs on every read. Nothing reaches
    the store until `save()` succeeds.
    """

    def __init__(self, store, doc_type: DocumentType = DocumentType.INVOICE, document: Document = None,
                 default_tax_rate: float = DEFAULT_TAX_RATE):
        self.store = store
        if document is not None:
            self._load(document)
            self.is_new = False
            return

        profile = store.business_profile
        self.id = generate_id()
        self.type = doc_type
        self.is_new = True
        self.document_number = store.next_document_number(doc_type) if profile else ""
        self.status = DocumentStatus.DRAFT
        self.client_id = ""
        self.line_items: List[LineItem] = []
        self.discount = DiscountSpec()
        self.tax_rate = default_tax_rate
        self.currency = profile.default_currency if profile else "ZAR"
        self.reference = ""
        self.sales_rep = profile.sales_rep if profile else ""
        self.notes = ""
        self.terms = ""
        self.payment_terms = DEFAULT_PAYMENT_TERMS
        self.due_date = ""
        self.issue_date = now_iso()[:10]
        self.ai_recommendation: Optional[AIRecommendation] = None
        self.team_members: List[TeamMember] = []
        self.created_at = None

    @classmethod
    def open(cls, store, document_id: str) -> "DocumentEditor":
        document = store.get_document(document_id)
        if document is None:
            raise KeyError(f"Document not found: {document_id}")
        return cls(store, document=document)

    def _load(self, document: Document):
        self.id = document.id
        self.type = document.type
        self.document_number = document.document_number
        self.status = document.status
        self.client_id = document.client_id
        self.line_items = list(document.line_items)
        self.discount = document.discount
        self.tax_rate = document.tax_rate
        self.currency = document.currency
        self.reference = document.reference or ""
        self.sales_rep = document.sales_rep or ""
        self.notes = document.notes or ""
        self.terms = document.terms or ""
        self.payment_terms = document.payment_terms or ""
        self.due_date = document.due_date or ""
        self.issue_date = document.issue_date
        self.ai_recommendation = document.ai_recommendation
        self.team_members = list(document.team_members)
        self.created_at = document.created_at

    # Line items ---------------------------------------------------------------

    def add_line_item(self, description: str = "", quantity: float = 1.0, unit_price: float = 0.0) -> LineItem:
        item = LineItem(description=description, quantity=quantity, unit_price=unit_price)
        self.line_items.append(item)
        return item

    def add_line_item_from_preset(self, preset: RatePreset, hours: float = 1.0) -> LineItem:
        return self.add_line_item(description=preset.name, quantity=hours, unit_price=preset.hourly_rate)

    def update_line_item(self, item_id: str, **changes) -> LineItem:
        for i, item in enumerate(self.line_items):
            if item.id == item_id:
                self.line_items[i] = item.with_changes(**changes)
                return self.line_items[i]
        raise KeyError(f"Line item not found: {item_id}")

    def delete_line_item(self, item_id: str):
        self.line_items = [item for item in self.line_items if item.id != item_id]

    # Discount / tax -----------------------------------------------------------

    def set_discount(self, amount: float, discount_type: DiscountType = None):
        self.discount = DiscountSpec(amount=amount, type=discount_type or self.discount.type)

    def set_tax_rate(self, rate: float):
        self.tax_rate = rate

    @property
    def totals(self) -> DocumentTotals:
        return Calculator.compute_totals(self.line_items, self.discount, self.tax_rate)

    # Pricing ------------------------------------------------------------------

    def apply_recommendation(self, recommendation: AIRecommendation):
        """Replace the line items with the recommendation breakdown."""
        self.line_items = [replace(item, id=generate_id()) for item in recommendation.breakdown]
        self.team_members = calculate_team_compensation(list(recommendation.team_suggestions))
        self.ai_recommendation = recommendation
        logger.info(f"Recommendation applied to {self.document_number}: "
                    f"{len(self.line_items)} items, {recommendation.source.value}")

    # Build / save / export ----------------------------------------------------

    def build_document(self) -> Document:
        profile = self.store.business_profile
        if profile is None:
            raise InputIncompleteError(MSG_NO_PROFILE)
        client = self.store.get_client(self.client_id) if self.client_id else None
        if client is None:
            raise InputIncompleteError(MSG_NO_CLIENT)
        if not self.line_items:
            raise InputIncompleteError(MSG_NO_ITEMS)
        # Editors opened before a business profile existed have no number yet
        if not self.document_number:
            self.document_number = self.store.next_document_number(self.type)

        document = Document(
            type=self.type,
            document_number=self.document_number,
            client=client,
            business_profile=profile,
            line_items=list(self.line_items),
            discount=self.discount,
            tax_rate=self.tax_rate,
            currency=self.currency,
            status=self.status,
            reference=self.reference or None,
            sales_rep=self.sales_rep or None,
            notes=self.notes or None,
            terms=self.terms or None,
            payment_terms=self.payment_terms or None,
            due_date=self.due_date or None,
            issue_date=self.issue_date,
            ai_recommendation=self.ai_recommendation,
            team_members=list(self.team_members),
            id=self.id,
        )
        if self.created_at:
            document.created_at = self.created_at
        document.validate()
        return document

    def save(self) -> Document:
        document = self.store.save_document(self.build_document())
        self.is_new = False
        self.created_at = document.created_at
        logger.info(f"Saved {document.title} {document.document_number} (total {document.totals().total:.2f})")
        return document

    def export(self, export_service, output_path: str = None) -> str:
        """Validate and export without saving. Defaults to the standard PDF file name."""
        document = self.build_document()
        if output_path is None:
            output_path = export_service.get_default_filename(document)
        return export_service.export(document, output_path)
