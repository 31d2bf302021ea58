# domain/pricing_engine.py
import math
from typing import Dict, List, Tuple

from .client import ClientCategory
from .line_item import LineItem
from .pricing import (AIAnalysisResult, AIRecommendation, Complexity, CostBreakdownEntry, Level,
                      ProjectInput, ProjectSize, RecommendationSource, RoleType, TeamMember)
from .recommendation_parser import infer_level, infer_role

HOURS_PER_WEEK = 40

# Base hourly rate per role, per currency
BASE_RATES: Dict[str, Dict[RoleType, float]] = {
    "ZAR": {
        RoleType.DEVELOPER: 650,
        RoleType.DESIGNER: 550,
        RoleType.MANAGER: 750,
        RoleType.CONSULTANT: 1200,
        RoleType.QA: 450,
        RoleType.DEVOPS: 700,
        RoleType.OTHER: 500,
    },
    "USD": {
        RoleType.DEVELOPER: 70,
        RoleType.DESIGNER: 60,
        RoleType.MANAGER: 75,
        RoleType.CONSULTANT: 90,
        RoleType.QA: 50,
        RoleType.DEVOPS: 80,
        RoleType.OTHER: 65,
    },
}

COMPLEXITY_MULTIPLIERS = {
    Complexity.LOW: 0.8,
    Complexity.MEDIUM: 1.0,
    Complexity.HIGH: 1.3,
}

SIZE_MULTIPLIERS = {
    ProjectSize.SMALL: 0.9,
    ProjectSize.MEDIUM: 1.0,
    ProjectSize.LARGE: 1.15,
    ProjectSize.ENTERPRISE: 1.35,
}

CLIENT_ADJUSTMENTS = {
    ClientCategory.INDIVIDUAL: 0.85,
    ClientCategory.SMALL_BUSINESS: 1.0,
    ClientCategory.ENTERPRISE: 1.25,
    ClientCategory.NON_PROFIT: 0.75,
}

LEVEL_ORDER = [Level.JUNIOR, Level.MID, Level.SENIOR, Level.LEAD]

PROJECT_MANAGEMENT_LABEL = "Project Management & Coordination"
PROJECT_MANAGEMENT_SHARE = 0.10

FALLBACK_MARKET_INSIGHTS = (
    "AI-powered market insights unavailable. Configure AI settings to get real-time market analysis, "
    "competitive benchmarking, and industry-specific recommendations based on current trends."
)


def round_half_up(value: float) -> int:
    """Nearest integer, halves rounded up (382.5 -> 383)."""
    return math.floor(value + 0.5)


def profit_margin_for(size: ProjectSize) -> float:
    if size == ProjectSize.ENTERPRISE:
        return 45.0
    if size == ProjectSize.LARGE:
        return 40.0
    return 35.0


def base_rate(role: RoleType, currency: str) -> float:
    rates = BASE_RATES.get(currency, BASE_RATES["ZAR"])
    return rates.get(role, rates[RoleType.OTHER])


class FallbackPricingEngine:
    """Deterministic estimate from fixed rate tables and multipliers."""

    def __init__(self, currency: str = "ZAR"):
        self.currency = currency

    def analyse(self, project: ProjectInput) -> AIAnalysisResult:
        complexity_multiplier = COMPLEXITY_MULTIPLIERS[project.complexity]
        client_adjustment = CLIENT_ADJUSTMENTS[project.client_category]
        size_multiplier = SIZE_MULTIPLIERS[project.project_size]

        hours = round_half_up(HOURS_PER_WEEK * project.estimated_duration * project.team_size / len(project.roles))

        entries = []
        for role in project.roles:
            adjusted_rate = round_half_up(base_rate(role, self.currency) * complexity_multiplier
                                          * client_adjustment * size_multiplier)
            entries.append(CostBreakdownEntry(
                role=role.value.capitalize(),
                hours=hours,
                rate=adjusted_rate,
                total=adjusted_rate * hours,
                justification=(f"Based on {project.complexity.value} complexity, "
                               f"{project.client_category.value} client type, and "
                               f"{project.project_size.value} project scope. "
                               f"Market rate ({self.currency}) adjusted for current demand."),
            ))

        subtotal = sum(entry.total for entry in entries)
        margin = profit_margin_for(project.project_size)

        return AIAnalysisResult(
            recommended_price=round_half_up(subtotal * (1 + margin / 100)),
            reasoning=self._reasoning(project, margin),
            cost_breakdown=tuple(entries),
            market_insights=FALLBACK_MARKET_INSIGHTS,
            profit_margin_recommendation=margin,
            confidence=0,
        )

    def recommend(self, project: ProjectInput) -> AIRecommendation:
        analysis = self.analyse(project)
        team = self.team_suggestions(project, analysis)
        return AIRecommendation(
            total_price=analysis.recommended_price,
            breakdown=with_project_management(breakdown_items(analysis), analysis.recommended_price,
                                              project.project_size),
            profit_margin=analysis.profit_margin_recommendation,
            reasoning=analysis.reasoning,
            team_suggestions=tuple(team),
            confidence=fallback_confidence(project, team),
            market_insights=analysis.market_insights,
            source=RecommendationSource.FALLBACK,
        )

    @staticmethod
    def team_suggestions(project: ProjectInput, analysis: AIAnalysisResult) -> List[TeamMember]:
        """One member per requested role; seniority spread junior to lead across the role list."""
        count = len(analysis.cost_breakdown)
        members = []
        for index, (role, entry) in enumerate(zip(project.roles, analysis.cost_breakdown)):
            level_index = min(index * len(LEVEL_ORDER) // count, len(LEVEL_ORDER) - 1)
            members.append(TeamMember(
                role=role,
                estimated_hours=entry.hours,
                hourly_rate=entry.rate,
                contribution_percentage=round(100 / count, 1),
                level=LEVEL_ORDER[level_index],
            ))
        return members

    @staticmethod
    def _reasoning(project: ProjectInput, margin: float) -> str:
        roles = ", ".join(role.value for role in project.roles)
        return (
            "This pricing is based on algorithmic analysis (AI not configured). The calculation considers:\n"
            f"• {project.complexity.value.upper()} complexity project requiring specialized expertise\n"
            f"• {project.client_category.value.replace('-', ' ').upper()} client with typical budget expectations\n"
            f"• {project.project_size.value.upper()} project scope affecting resource allocation\n"
            f"• {project.estimated_duration} weeks duration with team of {project.team_size}\n"
            f"• Market-competitive rates for {roles}\n"
            f"• {margin:g}% profit margin for sustainability\n\n"
            "Note: Enable AI configuration for more detailed, research-based recommendations."
        )


def fallback_confidence(project: ProjectInput, team: List[TeamMember]) -> float:
    confidence = 70
    if project.description and len(project.description) > 50:
        confidence += 10
    if len(project.roles) >= 2:
        confidence += 5
    if project.estimated_duration > 0:
        confidence += 5
    if team:
        confidence += 10
    return min(confidence, 95)


def breakdown_items(analysis: AIAnalysisResult) -> List[LineItem]:
    items = []
    for entry in analysis.cost_breakdown:
        if entry.hours > 0:
            items.append(LineItem(
                description=f"{entry.role} Services ({entry.hours:g} hours)",
                quantity=entry.hours,
                unit_price=entry.total / entry.hours,
            ))
        else:
            # Feature-based entries carry a flat price
            items.append(LineItem(description=entry.role, quantity=1, unit_price=entry.total, total=entry.total))
    return items


def with_project_management(items: List[LineItem], recommended_price: float, size: ProjectSize) -> Tuple[LineItem, ...]:
    """Append the coordination fee for large projects unless the breakdown already has one."""
    if size not in (ProjectSize.LARGE, ProjectSize.ENTERPRISE):
        return tuple(items)
    if any(infer_role(item.description) == RoleType.MANAGER for item in items):
        return tuple(items)
    fee = recommended_price * PROJECT_MANAGEMENT_SHARE
    return tuple(items) + (LineItem(description=PROJECT_MANAGEMENT_LABEL, quantity=1, unit_price=fee, total=fee),)


def recommendation_from_analysis(analysis: AIAnalysisResult, project: ProjectInput) -> AIRecommendation:
    """Normalize a validated provider analysis."""
    team = []
    total_hours = sum(entry.hours for entry in analysis.cost_breakdown)
    total_value = sum(entry.total for entry in analysis.cost_breakdown)
    for entry in analysis.cost_breakdown:
        if total_hours > 0:
            share = entry.hours / total_hours * 100
        elif total_value > 0:
            share = entry.total / total_value * 100
        else:
            share = 100 / len(analysis.cost_breakdown)
        team.append(TeamMember(
            role=infer_role(entry.role),
            estimated_hours=entry.hours,
            hourly_rate=entry.rate,
            contribution_percentage=round(share, 1),
            level=infer_level(entry.rate),
        ))

    return AIRecommendation(
        total_price=analysis.recommended_price,
        breakdown=with_project_management(breakdown_items(analysis), analysis.recommended_price,
                                          project.project_size),
        profit_margin=analysis.profit_margin_recommendation,
        reasoning=analysis.reasoning,
        team_suggestions=tuple(team),
        confidence=analysis.confidence,
        market_insights=analysis.market_insights,
        source=RecommendationSource.AI,
    )
