# domain/calculator.py
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List

from .line_item import LineItem


class DiscountType(Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


@dataclass(frozen=True)
class DiscountSpec:
    amount: float = 0.0
    type: DiscountType = DiscountType.PERCENTAGE


@dataclass(frozen=True)
class DocumentTotals:
    """Derived totals of a document. Never stored on its own."""
    subtotal: float
    discount_amount: float
    tax_amount: float
    total: float

    @property
    def after_discount(self) -> float:
        return self.subtotal - self.discount_amount


class Calculator:
    """Central engine for document totals."""

    @staticmethod
    def compute_totals(line_items: Iterable[LineItem], discount: DiscountSpec, tax_rate: float) -> DocumentTotals:
        # 1. Subtotal
        subtotal = sum(item.total for item in line_items)

        # 2. Discount, against the pre-discount subtotal when it is a percentage
        if discount.type == DiscountType.PERCENTAGE:
            discount_amount = subtotal * discount.amount / 100
        else:
            discount_amount = discount.amount

        # 3. Tax on the post-discount amount (not clamped)
        after_discount = subtotal - discount_amount
        tax_amount = after_discount * tax_rate / 100

        return DocumentTotals(
            subtotal=subtotal,
            discount_amount=discount_amount,
            tax_amount=tax_amount,
            total=after_discount + tax_amount,
        )

    @staticmethod
    def inclusive_totals(line_items: Iterable[LineItem], tax_rate: float) -> List[float]:
        """Per-row totals including tax, each computed independently."""
        return [item.inclusive_total(tax_rate) for item in line_items]

    @staticmethod
    def discount_percentage(discount: DiscountSpec) -> float:
        """Percentage shown in the 'overall discount' header; fixed discounts show 0."""
        return discount.amount if discount.type == DiscountType.PERCENTAGE else 0.0
