# infrastructure/quote_numbering_service.py
"""
Sequential quotation numbers that survive restarts.

A per-day counter is kept in the database so two quotations created on the
same day (in the same session or not) never share a number.

Format: {prefix}{yymmdd}_{counter:03d}
Example: QUO261019_001
"""

import datetime
from typing import Dict, List, Tuple

from infrastructure.database import Database

QUOTATION_PREFIX = "QUO"


class QuoteNumberingService:
    """Service for managing sequential quote numbers with persistence."""

    def __init__(self, db: Database, today=datetime.date.today):
        self.db = db
        self._today = today

    def get_next_quote_number(self, prefix: str = QUOTATION_PREFIX) -> Tuple[str, int]:
        """
        Reserve the next number for today.

        Returns:
            (quote_number, counter), e.g. ("QUO261019_001", 1)
        """
        today = self._today()
        counter = self.db.increment_quote_counter(today, prefix)
        return f"{prefix}{today.strftime('%y%m%d')}_{counter:03d}", counter

    def get_current_counter(self, prefix: str = QUOTATION_PREFIX) -> int:
        """Counter for today, without incrementing."""
        return self.db.get_quote_counter(self._today(), prefix)

    def reset_counter_for_date(self, date: datetime.date, prefix: str = QUOTATION_PREFIX):
        """Admin use only."""
        self.db.reset_quote_counter(date, prefix)

    def get_stats_for_date(self, date: datetime.date) -> List[Dict]:
        return self.db.get_quote_stats_for_date(date)
