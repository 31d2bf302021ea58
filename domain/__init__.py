"""Domain models package.

Exports core domain classes for easier imports:
- `LineItem`, `Calculator`, `DiscountSpec`, `DiscountType`, `DocumentTotals`
- `Document`, `DocumentType`, `DocumentStatus`, `BusinessProfile`, `Client`, `RatePreset`, `AppState`
- `ProjectInput`, `AIRecommendation`, `TeamMember` and the pricing enums
- the `SmartQuoteError` hierarchy
"""

from .business_profile import BusinessProfile
from .calculator import Calculator, DiscountSpec, DiscountType, DocumentTotals
from .client import Client, ClientCategory
from .document import Document, DocumentStatus, DocumentType
from .errors import AIProviderError, ExportError, InputIncompleteError, InvalidDocumentError, SmartQuoteError
from .line_item import LineItem
from .pricing import (AIAnalysisResult, AIRecommendation, Complexity, CostBreakdownEntry, Level,
                      PricingModel, ProjectInput, ProjectSize, RecommendationSource, RoleType, TeamMember)
from .rate_preset import RatePreset
from .state import AppState

__all__ = [
    "BusinessProfile", "Calculator", "DiscountSpec", "DiscountType", "DocumentTotals",
    "Client", "ClientCategory", "Document", "DocumentStatus", "DocumentType", "LineItem",
    "AIAnalysisResult", "AIRecommendation", "Complexity", "CostBreakdownEntry", "Level",
    "PricingModel", "ProjectInput", "ProjectSize", "RecommendationSource", "RoleType", "TeamMember",
    "RatePreset", "AppState",
    "SmartQuoteError", "InputIncompleteError", "InvalidDocumentError", "AIProviderError", "ExportError",
]
