# tests/test_pricing_service.py
"""
Pricing service against a mocked provider (httpx.MockTransport).
"""

import asyncio
import json

import httpx
import pytest

from domain.client import ClientCategory
from domain.errors import AIProviderError
from domain.pricing import Complexity, PricingModel, ProjectInput, ProjectSize, RecommendationSource, RoleType
from domain.pricing_prompt import SYSTEM_PROMPT, build_messages
from infrastructure.ai_providers import AIProviderClient, get_provider_spec
from infrastructure.configuration import ConfigurationService
from infrastructure.pricing_service import PricingService

PROJECT = ProjectInput(
    client_category=ClientCategory.SMALL_BUSINESS,
    project_size=ProjectSize.MEDIUM,
    complexity=Complexity.MEDIUM,
    estimated_duration=4,
    team_size=3,
    roles=[RoleType.DEVELOPER],
)

AI_ANALYSIS = {
    "recommendedPrice": 420000,
    "reasoning": "Four weeks of mid-level development.",
    "costBreakdown": [
        {"role": "Developer", "hours": 480, "rate": 650, "total": 312000, "justification": "Mid-range rate"},
    ],
    "marketInsights": "Cape Town agencies charge R550-R800/hr.",
    "profitMarginRecommendation": 35,
    "confidence": 80,
}


def chat_reply(content: str) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def run_with_transport(handler, project=PROJECT, provider="groq"):
    """Run one recommendation with every HTTP call answered by `handler`."""
    async def scenario():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            client = AIProviderClient(provider, "test-key", http_client=http)
            return await PricingService(client, currency="ZAR").recommend(project)
    return asyncio.run(scenario())


class TestPricingService:

    def test_valid_reply_is_used(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["auth"] = request.headers["Authorization"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=chat_reply("Analysis:\n" + json.dumps(AI_ANALYSIS)))

        rec = run_with_transport(handler)

        assert rec.source == RecommendationSource.AI
        assert rec.total_price == 420000
        assert rec.confidence == 80
        assert rec.breakdown[0].total == 312000
        assert seen["url"] == get_provider_spec("groq").url
        assert seen["auth"] == "Bearer test-key"
        assert seen["body"]["messages"][0] == {"role": "system", "content": SYSTEM_PROMPT}
        assert seen["body"]["temperature"] == 0.7
        assert seen["body"]["max_tokens"] == 2000

    def test_non_json_reply_falls_back(self):
        rec = run_with_transport(lambda request: httpx.Response(
            200, json=chat_reply("I think R400k would be fair for this project.")))

        assert rec.source == RecommendationSource.FALLBACK
        assert rec.confidence <= 95
        assert rec.total_price == round(650 * 480 * 1.35)

    def test_invalid_analysis_falls_back(self):
        bad = dict(AI_ANALYSIS, costBreakdown=[])
        rec = run_with_transport(lambda request: httpx.Response(200, json=chat_reply(json.dumps(bad))))
        assert rec.source == RecommendationSource.FALLBACK

    def test_http_error_falls_back(self):
        rec = run_with_transport(lambda request: httpx.Response(500, text="upstream exploded"))
        assert rec.source == RecommendationSource.FALLBACK

    def test_network_error_falls_back(self):
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        rec = run_with_transport(handler)
        assert rec.source == RecommendationSource.FALLBACK

    def test_no_provider_uses_fallback(self):
        rec = asyncio.run(PricingService().recommend(PROJECT))
        assert rec.source == RecommendationSource.FALLBACK
        assert 70 <= rec.confidence <= 95

    def test_huggingface_reply_shape(self):
        def handler(request):
            body = json.loads(request.content)
            assert "inputs" in body
            return httpx.Response(200, json=[{"generated_text": json.dumps(AI_ANALYSIS)}])

        rec = run_with_transport(handler, provider="huggingface")
        assert rec.source == RecommendationSource.AI


class TestAIProviderClient:

    def test_unknown_provider(self):
        with pytest.raises(AIProviderError):
            AIProviderClient("skynet", "key")

    def test_missing_content_raises(self):
        async def scenario():
            transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"choices": []}))
            async with httpx.AsyncClient(transport=transport) as http:
                await AIProviderClient("together", "k", http_client=http).complete([])

        with pytest.raises(AIProviderError):
            asyncio.run(scenario())


class TestFromConfiguration:

    def test_disabled_by_default(self, tmp_path, monkeypatch):
        monkeypatch.delenv("SMARTQUOTE_AI_API_KEY", raising=False)
        config = ConfigurationService(str(tmp_path / "app_config.json"))
        assert PricingService.from_configuration(config).provider_client is None

    def test_enabled_with_key(self, tmp_path, monkeypatch):
        monkeypatch.delenv("SMARTQUOTE_AI_API_KEY", raising=False)
        monkeypatch.delenv("SMARTQUOTE_AI_PROVIDER", raising=False)
        config = ConfigurationService(str(tmp_path / "app_config.json"))
        config.set_ai_config("openrouter", "sk-test")

        service = PricingService.from_configuration(config)
        assert service.provider_client is not None
        assert service.provider_client.spec.name == "openrouter"


class TestPrompt:

    def test_hourly_prompt_mentions_inputs(self):
        prompt = build_messages(PROJECT, "ZAR")[1]["content"]
        assert "Complexity Level: medium" in prompt
        assert "Required Roles: developer" in prompt
        assert "SOUTH AFRICAN RAND" in prompt
        assert '"recommendedPrice"' in prompt

    def test_feature_prompt(self):
        project = ProjectInput(
            client_category=ClientCategory.ENTERPRISE, project_size=ProjectSize.LARGE,
            complexity=Complexity.HIGH, estimated_duration=8, team_size=5,
            roles=[RoleType.DEVELOPER], pricing_model=PricingModel.FEATURE_BASED,
            features=["User login", "Payments", "  "],
        )
        prompt = build_messages(project, "USD")[1]["content"]
        assert "FEATURE-BASED PRICING MODEL" in prompt
        assert "- Payments" in prompt
        assert "Total features: 2" in prompt
