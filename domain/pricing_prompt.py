# domain/pricing_prompt.py
"""Prompt construction for the external pricing analysis.

The rate tables below are guidance for the model only; nothing here is
computed locally.
"""

from dataclasses import dataclass
from typing import Dict, List

from .pricing import PricingModel, ProjectInput

SYSTEM_PROMPT = "You are an expert pricing consultant. Always respond in valid JSON format."


@dataclass(frozen=True)
class MarketGuide:
    market: str
    currency_label: str
    hourly_rates: str
    feature_rates: str
    margin_range: str


SOUTH_AFRICA = MarketGuide(
    market="SOUTH AFRICAN",
    currency_label="SOUTH AFRICAN RAND (ZAR/R)",
    hourly_rates="""Junior Level:
- Developer: R300-R500/hr
- Designer: R300-R450/hr
- QA/Testing: R250-R400/hr

Mid Level:
- Developer: R500-R800/hr
- Designer: R450-R650/hr
- Project Manager: R600-R900/hr
- QA/Testing: R400-R550/hr

Senior Level:
- Developer: R800-R1500/hr
- Designer: R650-R900/hr
- Project Manager: R900-R1200/hr
- Consultant: R1000-R1800/hr""",
    feature_rates="""Simple Features (R8,000 - R25,000 each):
- User login/registration: R12,000 - R18,000
- Basic contact form: R8,000 - R12,000
- Email notifications: R10,000 - R15,000
- Basic search: R15,000 - R20,000

Medium Features (R25,000 - R60,000 each):
- User profile management: R30,000 - R45,000
- File upload system: R35,000 - R50,000
- Admin dashboard: R40,000 - R60,000
- Reporting system: R35,000 - R55,000
- API integration: R30,000 - R50,000

Complex Features (R60,000 - R150,000 each):
- Payment gateway integration: R80,000 - R120,000
- Real-time chat system: R90,000 - R130,000
- Advanced analytics: R70,000 - R110,000
- Multi-user collaboration: R85,000 - R140,000
- E-commerce system: R100,000 - R150,000""",
    margin_range="30-40",
)

UNITED_STATES = MarketGuide(
    market="UNITED STATES",
    currency_label="US DOLLARS (USD/$)",
    hourly_rates="""Junior Level:
- Developer: $40/hr
- Designer: $35/hr
- QA/Testing: $30/hr

Mid Level:
- Developer: $70/hr
- Designer: $60/hr
- Project Manager: $75/hr
- QA/Testing: $50/hr

Senior Level:
- Developer: $100/hr
- Designer: $90/hr
- Project Manager: $105/hr
- Consultant: $130/hr""",
    feature_rates="""Simple Features ($1,000 - $3,000 each):
- User login/registration, contact form, email notifications, basic search

Medium Features ($3,000 - $8,000 each):
- Profile management, file uploads, admin dashboard, reporting, API integration

Complex Features ($8,000 - $20,000 each):
- Payment gateway, real-time chat, advanced analytics, e-commerce""",
    margin_range="30-40",
)

MARKET_GUIDES: Dict[str, MarketGuide] = {
    "ZAR": SOUTH_AFRICA,
    "USD": UNITED_STATES,
}


def get_market_guide(currency: str) -> MarketGuide:
    return MARKET_GUIDES.get(currency, SOUTH_AFRICA)


def build_messages(project: ProjectInput, currency: str = "ZAR") -> List[Dict[str, str]]:
    """System + user message list sent to every provider."""
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": build_prompt(project, currency)},
    ]


def build_prompt(project: ProjectInput, currency: str = "ZAR") -> str:
    guide = get_market_guide(currency)
    roles = ", ".join(role.value for role in project.roles)

    if project.pricing_model == PricingModel.FEATURE_BASED:
        body = _feature_section(project, guide)
        reasoning_hint = "how you priced each feature"
        role_hint = "feature name (e.g., User Authentication)"
        hours_hint = "0 for feature-based"
        rate_hint = f"price per feature in {currency}"
        total_hint = f"feature price in {currency}"
        justification_hint = "why this feature costs this much"
    else:
        body = _hourly_section(project, guide, roles, currency)
        reasoning_hint = (f"how you used complexity={project.complexity.value}, "
                          f"size={project.project_size.value}, duration={project.estimated_duration}")
        role_hint = "role name (e.g., developer)"
        hours_hint = f"based on {project.estimated_duration} weeks"
        rate_hint = f"{currency}/hr"
        total_hint = "hours × rate"
        justification_hint = "why this rate/hours"

    return f"""You are an expert pricing consultant for the {guide.market} market. Analyze this project and provide detailed pricing recommendations in {guide.currency_label}.
{body}
Respond ONLY with valid JSON:
{{
  "recommendedPrice": number (in {currency} - total project price),
  "reasoning": "Detailed explanation of {reasoning_hint}",
  "costBreakdown": [
    {{
      "role": "{role_hint}",
      "hours": number ({hours_hint}),
      "rate": number ({rate_hint}),
      "total": number ({total_hint}),
      "justification": "{justification_hint}"
    }}
  ],
  "marketInsights": "{guide.market.title()} market analysis",
  "profitMarginRecommendation": number ({guide.margin_range}),
  "confidence": number (0-100)
}}"""


def _hourly_section(project: ProjectInput, guide: MarketGuide, roles: str, currency: str) -> str:
    complexity = project.complexity.value
    size = project.project_size.value
    description = f"\n- Project Description: {project.description}" if project.description else ""
    return f"""
HOURLY RATE PRICING MODEL (Traditional cost-based)

PROJECT DETAILS:
- Client Category: {project.client_category.value} (affects budget expectations)
- Project Size: {size} (affects scope and team size)
- Complexity Level: {complexity} (VERY IMPORTANT - affects rates and hours!)
- Project Duration: {project.estimated_duration} weeks (affects total hours)
- Team Size: {project.team_size} people
- Required Roles: {roles}{description}

{guide.market} MARKET RATES (in {currency} per hour):
{guide.hourly_rates}

COMPLEXITY ADJUSTMENTS - ACTUALLY USE THE COMPLEXITY="{complexity}":
- low: Use LOWER end rates, fewer hours per week (20-30 hrs/week)
- medium: Use MID-RANGE rates, moderate hours (30-40 hrs/week)
- high: Use HIGHER end rates, more hours (40-50 hrs/week)

PROJECT SIZE="{size}" ADJUSTMENTS:
- small: Minimal team (1-2 people), focused scope, fewer total hours
- medium: Balanced team (3-5 people), moderate scope, standard hours
- large: Full team (5-8 people), comprehensive scope, many hours
- enterprise: Large team (8+ people), extensive scope, maximum hours

DURATION: {project.estimated_duration} weeks
Calculate total hours as: (hours per week based on complexity) × {project.estimated_duration} weeks

REQUIREMENTS:
1. All prices MUST be in {guide.currency_label}
2. ACTUALLY adjust rates based on complexity level
3. ACTUALLY adjust hours based on project size and duration
4. Use local market rates for the {guide.market} market
5. For complexity="{complexity}", if it's high, use senior people and more hours!
6. Provide breakdown for EACH role in: {roles}
7. Include realistic market insights
8. Profit margin: {guide.margin_range}%
"""


def _feature_section(project: ProjectInput, guide: MarketGuide) -> str:
    features = "\n".join(f"- {name}" for name in project.features if name.strip())
    description = f"\n{project.description}" if project.description else ""
    return f"""
FEATURE-BASED PRICING MODEL (Value-based, NOT hourly!)

PROJECT FEATURES:
{features}
Total features: {len([f for f in project.features if f.strip()])}{description}

CRITICAL: Price EACH FEATURE based on its VALUE and COMPLEXITY, not developer hours!

{guide.market} FEATURE PRICING GUIDELINES:
{guide.feature_rates}

For complexity="{project.complexity.value}":
- low: Use SIMPLE feature rates
- medium: Use MEDIUM feature rates
- high: Use COMPLEX feature rates

REQUIREMENTS:
1. Analyze EACH feature mentioned
2. Price each feature individually based on local market value
3. Consider feature complexity, not just hours
4. Add {guide.margin_range}% profit margin
5. Provide reasoning for each feature's price
6. Total = sum of all feature prices
"""
