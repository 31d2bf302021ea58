# domain/pricing.py
"""Value types of the pricing assistant.

`ProjectInput` describes the project to price, `AIAnalysisResult` is the
provider-shaped analysis (what the model returns, or what the fallback
computes) and `AIRecommendation` is the normalized result shown to the user.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from .client import ClientCategory
from .line_item import LineItem, generate_id


class RoleType(Enum):
    DEVELOPER = "developer"
    DESIGNER = "designer"
    MANAGER = "manager"
    CONSULTANT = "consultant"
    QA = "qa"
    DEVOPS = "devops"
    OTHER = "other"


class Level(Enum):
    JUNIOR = "junior"
    MID = "mid"
    SENIOR = "senior"
    LEAD = "lead"


class ProjectSize(Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    ENTERPRISE = "enterprise"


class Complexity(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class PricingModel(Enum):
    HOURLY = "hourly"
    FEATURE_BASED = "feature-based"


class RecommendationSource(Enum):
    AI = "ai"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class ProjectInput:
    client_category: ClientCategory
    project_size: ProjectSize
    complexity: Complexity
    estimated_duration: int  # weeks
    team_size: int
    roles: Tuple[RoleType, ...]
    description: str = ""
    pricing_model: PricingModel = PricingModel.HOURLY
    features: Tuple[str, ...] = ()

    def __post_init__(self):
        # Accept lists from callers, keep the instance hashable
        object.__setattr__(self, "roles", tuple(self.roles))
        object.__setattr__(self, "features", tuple(self.features))
        if not self.roles:
            raise ValueError("At least one role is required")


@dataclass(frozen=True)
class TeamMember:
    role: RoleType
    estimated_hours: float
    hourly_rate: float
    contribution_percentage: float
    level: Level
    id: str = field(default_factory=generate_id)


@dataclass(frozen=True)
class CostBreakdownEntry:
    role: str
    hours: float
    rate: float
    total: float
    justification: str = ""


@dataclass(frozen=True)
class AIAnalysisResult:
    recommended_price: float
    reasoning: str
    cost_breakdown: Tuple[CostBreakdownEntry, ...]
    market_insights: str = ""
    profit_margin_recommendation: float = 0.0
    confidence: float = 0.0


@dataclass(frozen=True)
class AIRecommendation:
    total_price: float
    breakdown: Tuple[LineItem, ...]
    profit_margin: float
    reasoning: str
    team_suggestions: Tuple[TeamMember, ...]
    confidence: float
    market_insights: str = ""
    source: RecommendationSource = RecommendationSource.FALLBACK

    @property
    def breakdown_total(self) -> float:
        return sum(item.total for item in self.breakdown)


@dataclass(frozen=True)
class ParseResult:
    """Outcome of parsing a provider reply: either `value` or a failure `reason`."""
    value: Optional[AIAnalysisResult] = None
    reason: str = ""

    @property
    def ok(self) -> bool:
        return self.value is not None

    @classmethod
    def success(cls, value: AIAnalysisResult) -> "ParseResult":
        return cls(value=value)

    @classmethod
    def failure(cls, reason: str) -> "ParseResult":
        return cls(reason=reason)


def calculate_team_compensation(members: List[TeamMember]) -> List[TeamMember]:
    """Re-derive each member's contribution from their share of the estimated hours."""
    total_hours = sum(m.estimated_hours for m in members)
    if total_hours <= 0:
        return list(members)
    result = []
    for member in members:
        contribution = member.estimated_hours / total_hours * 100
        result.append(TeamMember(
            role=member.role,
            estimated_hours=member.estimated_hours,
            hourly_rate=member.hourly_rate,
            contribution_percentage=round(contribution, 1),
            level=member.level,
            id=member.id,
        ))
    return result
