"""
LLM - OpenAI Provider

Chat completions over the OpenAI wire format, shared by hosted
OpenAI-compatible APIs and local LM Studio servers.
"""

from typing import Any, Dict, List, Optional

import httpx

from honig.config import ConfigurationError, get_settings
from honig.llm.base_provider import BaseLLMProvider, LLMError


class OpenAICompatibleProvider(BaseLLMProvider):
    """POST {base_url}/chat/completions and return the first choice."""

    name = "openai-compatible"
    requires_api_key = False

    def __init__(self, settings=None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings or get_settings()
        self.base_url = self.settings.llm.base_url.rstrip("/")
        self.api_key = self.settings.llm.api_key
        self.model = self.settings.llm.model
        self.timeout = self.settings.llm.timeout_ms / 1000
        self._transport = transport

        if self.requires_api_key and not self.api_key:
            raise ConfigurationError(f"LLM_API_KEY is required for the {self.name} provider")

    def _headers(self) -> Dict[str, str]:
        if not self.api_key:
            return {}
        return {"Authorization": f"Bearer {self.api_key}"}

    async def complete(
        self,
        prompt: str,
        max_tokens: int = 1000,
        temperature: float = 0.7,
        stop: Optional[List[str]] = None,
    ) -> str:
        messages = [{"role": "user", "content": prompt}]
        return await self._chat(messages, max_tokens, temperature, stop)

    async def chat(
        self,
        messages: List[Dict[str, str]],
        max_tokens: int = 1000,
        temperature: float = 0.7,
    ) -> str:
        return await self._chat(messages, max_tokens, temperature)

    async def _chat(
        self,
        messages: List[Dict[str, str]],
        max_tokens: int,
        temperature: float,
        stop: Optional[List[str]] = None,
    ) -> str:
        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "max_tokens": max_tokens,
            "temperature": temperature,
        }
        if stop:
            payload["stop"] = stop

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                response = await client.post(
                    f"{self.base_url}/chat/completions",
                    json=payload,
                    headers=self._headers(),
                )
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                raise LLMError(
                    f"{self.name} error {e.response.status_code}: {e.response.text[:200]}"
                ) from e
            except httpx.HTTPError as e:
                raise LLMError(f"{self.name} request failed: {e}") from e

        choices = response.json().get("choices") or []
        if not choices:
            raise LLMError(f"{self.name} returned no choices")
        return choices[0].get("message", {}).get("content") or ""


class OpenAIProvider(OpenAICompatibleProvider):
    """Hosted OpenAI-compatible API with bearer key."""

    name = "openai"
    requires_api_key = True

    def is_available(self) -> bool:
        return bool(self.api_key)
