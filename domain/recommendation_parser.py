# domain/recommendation_parser.py
"""Parsing of free-text provider replies into `AIAnalysisResult`.

Providers are not guaranteed to answer with pure JSON, so the first balanced
`{...}` object is extracted from the text before decoding. The result is a
`ParseResult`: either the validated analysis or the reason it was rejected.
"""

import json
import math
from typing import Any, List, Optional, Tuple

from .pricing import AIAnalysisResult, CostBreakdownEntry, Level, ParseResult, RoleType

# Checked in order; the first keyword found in the lower-cased label wins.
ROLE_KEYWORDS: List[Tuple[str, RoleType]] = [
    ("devops", RoleType.DEVOPS),
    ("infrastructure", RoleType.DEVOPS),
    ("qa", RoleType.QA),
    ("quality", RoleType.QA),
    ("test", RoleType.QA),
    ("design", RoleType.DESIGNER),
    ("ux", RoleType.DESIGNER),
    ("manag", RoleType.MANAGER),
    ("coordinat", RoleType.MANAGER),
    ("scrum", RoleType.MANAGER),
    ("consult", RoleType.CONSULTANT),
    ("analyst", RoleType.CONSULTANT),
    ("architect", RoleType.CONSULTANT),
    ("develop", RoleType.DEVELOPER),
    ("engineer", RoleType.DEVELOPER),
    ("programmer", RoleType.DEVELOPER),
]

# Upper bounds (exclusive) of each level; anything above the last is LEAD.
LEVEL_THRESHOLDS: List[Tuple[float, Level]] = [
    (60, Level.JUNIOR),
    (90, Level.MID),
    (120, Level.SENIOR),
]


def infer_role(label: str) -> RoleType:
    lowered = (label or "").lower()
    for keyword, role in ROLE_KEYWORDS:
        if keyword in lowered:
            return role
    return RoleType.OTHER


def infer_level(rate: float) -> Level:
    for upper_bound, level in LEVEL_THRESHOLDS:
        if rate < upper_bound:
            return level
    return Level.LEAD


def extract_json_object(text: str) -> Optional[str]:
    """Return the first balanced `{...}` substring of `text`, or None."""
    if not text:
        return None
    start = text.find("{")
    while start != -1:
        end = _matching_brace(text, start)
        if end is not None:
            return text[start:end + 1]
        start = text.find("{", start + 1)
    return None


def _matching_brace(text: str, start: int) -> Optional[int]:
    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index
    return None


def _is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    return isinstance(value, int) or (isinstance(value, float) and math.isfinite(value))


def _as_float(value: Any, default: float = 0.0) -> float:
    if _is_number(value):
        return float(value)
    try:
        number = float(str(value).replace(",", ""))
    except (TypeError, ValueError):
        return default
    # NaN and Infinity are valid JSON constants for the decoder but not amounts
    return number if math.isfinite(number) else default


def parse_analysis(text: str) -> ParseResult:
    payload = extract_json_object(text)
    if payload is None:
        return ParseResult.failure("No JSON object found in response")

    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        return ParseResult.failure(f"Malformed JSON: {e.msg}")

    price = data.get("recommendedPrice")
    if not _is_number(price) or price <= 0:
        return ParseResult.failure("recommendedPrice missing or not a positive number")

    raw_breakdown = data.get("costBreakdown")
    if not isinstance(raw_breakdown, list) or not raw_breakdown:
        return ParseResult.failure("costBreakdown missing or empty")

    entries = []
    for raw in raw_breakdown:
        if not isinstance(raw, dict):
            return ParseResult.failure("costBreakdown entry is not an object")
        hours = _as_float(raw.get("hours"))
        rate = _as_float(raw.get("rate"))
        total = _as_float(raw.get("total"), default=hours * rate)
        entries.append(CostBreakdownEntry(
            role=str(raw.get("role") or "Other"),
            hours=hours,
            rate=rate,
            total=total,
            justification=str(raw.get("justification") or ""),
        ))

    confidence = min(max(_as_float(data.get("confidence")), 0.0), 100.0)
    return ParseResult.success(AIAnalysisResult(
        recommended_price=float(price),
        reasoning=str(data.get("reasoning") or ""),
        cost_breakdown=tuple(entries),
        market_insights=str(data.get("marketInsights") or ""),
        profit_margin_recommendation=_as_float(data.get("profitMarginRecommendation")),
        confidence=confidence,
    ))
