# domain/line_item.py
import uuid
from dataclasses import dataclass, field, replace
from typing import Optional


def generate_id() -> str:
    return str(uuid.uuid4())


@dataclass
class LineItem:
    """One billable row. `total` always equals quantity x unit_price."""
    description: str = ""
    quantity: float = 1.0
    unit_price: float = 0.0
    total: float = None
    id: str = field(default_factory=generate_id)
    tax_rate: Optional[float] = None

    def __post_init__(self):
        if self.total is None:
            self.total = self.quantity * self.unit_price

    def with_changes(self, **changes) -> "LineItem":
        """Return a copy with the given fields changed and the total recomputed."""
        changes.pop("id", None)
        changes.pop("total", None)
        updated = replace(self, **changes)
        updated.total = updated.quantity * updated.unit_price
        return updated

    def inclusive_total(self, tax_rate: float) -> float:
        """Row total including tax, as printed in the 'Incl. Total' column."""
        return self.total * (1 + tax_rate / 100)
