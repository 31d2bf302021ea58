# tests/test_recommendation_parser.py
import json

import pytest

from domain.pricing import Level, RoleType
from domain.recommendation_parser import extract_json_object, infer_level, infer_role, parse_analysis

VALID_REPLY = {
    "recommendedPrice": 185000,
    "reasoning": "Mid-size build for an SME",
    "costBreakdown": [
        {"role": "Senior Full-Stack Developer", "hours": 160, "rate": 95, "total": 15200,
         "justification": "Core build"},
        {"role": "UI/UX Designer", "hours": 40, "rate": 55, "total": 2200, "justification": "Screens"},
    ],
    "marketInsights": "Demand for web work is steady.",
    "profitMarginRecommendation": 35,
    "confidence": 82,
}


class TestExtractJson:

    def test_object_wrapped_in_prose(self):
        text = 'Sure! Here is the analysis:\n{"a": 1, "b": {"c": 2}}\nLet me know.'
        assert extract_json_object(text) == '{"a": 1, "b": {"c": 2}}'

    def test_markdown_fence(self):
        text = '```json\n{"recommendedPrice": 10}\n```'
        assert json.loads(extract_json_object(text)) == {"recommendedPrice": 10}

    def test_braces_inside_strings(self):
        text = 'x {"reasoning": "use {curly} braces } freely", "n": 1} y'
        assert json.loads(extract_json_object(text))["n"] == 1

    def test_unbalanced_opening_brace_is_skipped(self):
        text = 'price { maybe... then {"ok": true}'
        # The first '{' never closes; the scan moves on to the next one
        assert json.loads(extract_json_object(text)) == {"ok": True}

    def test_no_object(self):
        assert extract_json_object("I cannot help with that.") is None
        assert extract_json_object("") is None


class TestParseAnalysis:

    def test_valid_reply(self):
        result = parse_analysis("Here you go: " + json.dumps(VALID_REPLY))
        assert result.ok
        analysis = result.value
        assert analysis.recommended_price == 185000
        assert len(analysis.cost_breakdown) == 2
        assert analysis.cost_breakdown[1].role == "UI/UX Designer"
        assert analysis.confidence == 82

    def test_non_json_text_fails(self):
        result = parse_analysis("The project should cost around R150k.")
        assert not result.ok
        assert result.value is None
        assert result.reason

    def test_malformed_json_fails(self):
        assert not parse_analysis('{"recommendedPrice": 100, costBreakdown: []}').ok

    @pytest.mark.parametrize("price", [None, 0, -5, "100000", True, float("nan"), float("inf"), float("-inf")])
    def test_bad_price_fails(self, price):
        reply = dict(VALID_REPLY, recommendedPrice=price)
        if price is None:
            del reply["recommendedPrice"]
        assert not parse_analysis(json.dumps(reply)).ok

    def test_non_finite_amounts_are_not_kept(self):
        reply = dict(VALID_REPLY, costBreakdown=[
            {"role": "Developer", "hours": float("nan"), "rate": float("inf"), "total": 5000},
        ])
        result = parse_analysis(json.dumps(reply))
        assert result.ok
        entry = result.value.cost_breakdown[0]
        assert (entry.hours, entry.rate, entry.total) == (0.0, 0.0, 5000.0)

    def test_nan_price_in_raw_reply_fails(self):
        text = '{"recommendedPrice": NaN, "costBreakdown": [{"role": "Developer", "hours": 10, "rate": 100}]}'
        assert not parse_analysis(text).ok

    @pytest.mark.parametrize("breakdown", [None, [], "developer", [1, 2]])
    def test_bad_breakdown_fails(self, breakdown):
        reply = dict(VALID_REPLY, costBreakdown=breakdown)
        assert not parse_analysis(json.dumps(reply)).ok

    def test_missing_optional_fields_get_defaults(self):
        reply = {"recommendedPrice": 5000, "costBreakdown": [{"role": "Developer", "hours": 10, "rate": 500}]}
        result = parse_analysis(json.dumps(reply))
        assert result.ok
        entry = result.value.cost_breakdown[0]
        assert entry.total == 5000
        assert result.value.reasoning == ""
        assert result.value.confidence == 0

    def test_confidence_is_clamped(self):
        result = parse_analysis(json.dumps(dict(VALID_REPLY, confidence=140)))
        assert result.value.confidence == 100


class TestNormalization:

    @pytest.mark.parametrize("label,role", [
        ("Senior Full-Stack Developer", RoleType.DEVELOPER),
        ("Software Engineer", RoleType.DEVELOPER),
        ("UI/UX Designer", RoleType.DESIGNER),
        ("Project Manager", RoleType.MANAGER),
        ("Scrum Master", RoleType.MANAGER),
        ("Business Analyst", RoleType.CONSULTANT),
        ("QA Tester", RoleType.QA),
        ("Test Automation Engineer", RoleType.QA),
        ("DevOps Engineer", RoleType.DEVOPS),
        ("Copywriter", RoleType.OTHER),
        ("", RoleType.OTHER),
    ])
    def test_infer_role(self, label, role):
        assert infer_role(label) == role

    @pytest.mark.parametrize("rate,level", [
        (0, Level.JUNIOR),
        (59.99, Level.JUNIOR),
        (60, Level.MID),
        (89, Level.MID),
        (90, Level.SENIOR),
        (119.5, Level.SENIOR),
        (120, Level.LEAD),
        (650, Level.LEAD),
    ])
    def test_infer_level(self, rate, level):
        assert infer_level(rate) == level
