# infrastructure/ai_providers.py
"""
Text-completion providers used by the pricing assistant.

Every provider takes the same `[{"role": ..., "content": ...}]` message list
and returns the assistant text. groq, together and openrouter speak the
OpenAI chat-completions protocol; huggingface is a plain text-generation
inference endpoint and receives the messages flattened into one prompt.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

import httpx

from domain.errors import AIProviderError
from infrastructure.logging_service import get_module_logger

logger = get_module_logger("AIProviders", "ai_providers.log")

DEFAULT_TEMPERATURE = 0.7
DEFAULT_MAX_TOKENS = 2000


@dataclass(frozen=True)
class ProviderSpec:
    name: str
    url: str
    model: str
    chat_completions: bool = True
    extra_headers: Optional[Dict[str, str]] = None


PROVIDERS: Dict[str, ProviderSpec] = {
    "groq": ProviderSpec(
        name="groq",
        url="https://api.groq.com/openai/v1/chat/completions",
        model="llama-3.3-70b-versatile",
    ),
    "together": ProviderSpec(
        name="together",
        url="https://api.together.xyz/v1/chat/completions",
        model="mistralai/Mixtral-8x7B-Instruct-v0.1",
    ),
    "openrouter": ProviderSpec(
        name="openrouter",
        url="https://openrouter.ai/api/v1/chat/completions",
        model="mistralai/mixtral-8x7b-instruct",
        extra_headers={"X-Title": "SmartQuote"},
    ),
    "huggingface": ProviderSpec(
        name="huggingface",
        url="https://api-inference.huggingface.co/models/mistralai/Mixtral-8x7B-Instruct-v0.1",
        model="mistralai/Mixtral-8x7B-Instruct-v0.1",
        chat_completions=False,
    ),
}


def get_provider_spec(name: str) -> ProviderSpec:
    try:
        return PROVIDERS[name]
    except KeyError:
        raise AIProviderError(f"Unsupported AI provider: {name}") from None


class AIProviderClient:
    """Sends a message list to one provider and returns the reply text."""

    def __init__(self, provider: str, api_key: str, timeout: float = 60.0,
                 http_client: Optional[httpx.AsyncClient] = None):
        self.spec = get_provider_spec(provider)
        self.api_key = api_key
        self.timeout = timeout
        self._http = http_client

    async def complete(self, messages: List[Dict[str, str]],
                       temperature: float = DEFAULT_TEMPERATURE,
                       max_tokens: int = DEFAULT_MAX_TOKENS) -> str:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }
        if self.spec.extra_headers:
            headers.update(self.spec.extra_headers)

        if self.spec.chat_completions:
            payload = {
                "model": self.spec.model,
                "messages": messages,
                "temperature": temperature,
                "max_tokens": max_tokens,
            }
        else:
            payload = {
                "inputs": "\n\n".join(m["content"] for m in messages),
                "parameters": {"max_new_tokens": max_tokens, "temperature": temperature},
            }

        logger.info(f"Calling {self.spec.name} ({self.spec.model})")
        try:
            if self._http is not None:
                resp = await self._http.post(self.spec.url, headers=headers, json=payload)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as http:
                    resp = await http.post(self.spec.url, headers=headers, json=payload)
        except httpx.HTTPError as e:
            raise AIProviderError(f"{self.spec.name} request failed: {e}") from e

        logger.detail(f"{self.spec.name} responded {resp.status_code}")
        if not resp.is_success:
            raise AIProviderError(f"{self.spec.name} API error {resp.status_code}: {resp.text[:500]}")

        try:
            data = resp.json()
        except ValueError as e:
            raise AIProviderError(f"{self.spec.name} returned a non-JSON body") from e
        return self._reply_text(data)

    def _reply_text(self, data) -> str:
        if self.spec.chat_completions:
            try:
                return data["choices"][0]["message"]["content"] or ""
            except (KeyError, IndexError, TypeError) as e:
                raise AIProviderError(f"{self.spec.name} reply has no message content") from e
        if isinstance(data, list) and data and isinstance(data[0], dict):
            return data[0].get("generated_text", "") or ""
        raise AIProviderError(f"{self.spec.name} reply has no generated text")
