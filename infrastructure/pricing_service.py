# infrastructure/pricing_service.py
from typing import Optional

from domain.errors import AIProviderError
from domain.pricing import AIRecommendation, ProjectInput
from domain.pricing_engine import FallbackPricingEngine, recommendation_from_analysis
from domain.pricing_prompt import build_messages
from domain.recommendation_parser import parse_analysis
from infrastructure.ai_providers import AIProviderClient
from infrastructure.logging_service import get_module_logger

logger = get_module_logger("PricingService", "pricing.log")


class PricingService:
    """
    Pricing recommendation for a project.

    With a provider configured, the project is sent to the model and its JSON
    reply is parsed and normalized. Without one, or when the call or the
    parsing fails, the deterministic fallback is used instead. Callers never
    see provider errors.
    """

    def __init__(self, provider_client: Optional[AIProviderClient] = None, currency: str = "ZAR"):
        self.provider_client = provider_client
        self.currency = currency
        self.fallback = FallbackPricingEngine(currency)

    @classmethod
    def from_configuration(cls, config) -> "PricingService":
        client = None
        if config.is_ai_enabled():
            try:
                client = AIProviderClient(config.get_ai_provider(), config.get_ai_api_key(),
                                          timeout=config.get_ai_timeout())
            except AIProviderError as e:
                logger.warning(f"AI disabled: {e}")
        return cls(provider_client=client, currency=config.get_pricing_currency())

    async def recommend(self, project: ProjectInput) -> AIRecommendation:
        if self.provider_client is None:
            logger.info("No AI provider configured, using algorithmic pricing")
            return self.fallback.recommend(project)

        messages = build_messages(project, self.currency)
        logger.detail(f"Prompt built ({len(messages[-1]['content'])} chars)")
        try:
            reply = await self.provider_client.complete(messages)
        except AIProviderError as e:
            logger.warning(f"AI pricing unavailable, falling back: {e}")
            return self.fallback.recommend(project)

        result = parse_analysis(reply)
        if not result.ok:
            logger.warning(f"AI reply rejected ({result.reason}), falling back")
            logger.detail(f"Rejected reply: {reply[:1000]}")
            return self.fallback.recommend(project)

        logger.info(f"AI recommendation accepted: {result.value.recommended_price}")
        return recommendation_from_analysis(result.value, project)
