"""
LLM - Gemini Provider

Google Generative Language REST provider.
"""

from typing import Dict, List, Optional

import httpx

from honig.config import ConfigurationError, get_settings
from honig.llm.base_provider import BaseLLMProvider, LLMError


class GeminiProvider(BaseLLMProvider):
    """Gemini generateContent provider."""

    name = "gemini"

    def __init__(self, settings=None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings or get_settings()
        self.base_url = self.settings.llm.base_url.rstrip("/")
        self.api_key = self.settings.llm.api_key
        self.model = self.settings.llm.model
        self.timeout = self.settings.llm.timeout_ms / 1000
        self._transport = transport

        if not self.api_key:
            raise ConfigurationError("LLM_API_KEY is required for the gemini provider")

    async def complete(
        self,
        prompt: str,
        max_tokens: int = 1000,
        temperature: float = 0.7,
        stop: Optional[List[str]] = None,
    ) -> str:
        """Generate completion using Gemini."""
        messages = [{"role": "user", "content": prompt}]
        return await self.chat(messages, max_tokens, temperature, stop)

    async def chat(
        self,
        messages: List[Dict[str, str]],
        max_tokens: int = 1000,
        temperature: float = 0.7,
        stop: Optional[List[str]] = None,
    ) -> str:
        """Generate chat completion using Gemini."""
        url = f"{self.base_url}/models/{self.model}:generateContent"

        # Gemini names the assistant role "model" and has no system role
        contents = [
            {
                "role": "model" if m["role"] == "assistant" else "user",
                "parts": [{"text": m["content"]}],
            }
            for m in messages
        ]
        generation_config = {
            "maxOutputTokens": max_tokens,
            "temperature": temperature,
        }
        if stop:
            generation_config["stopSequences"] = stop

        payload = {"contents": contents, "generationConfig": generation_config}

        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            try:
                response = await client.post(
                    url, json=payload, headers={"x-goog-api-key": self.api_key}
                )
                response.raise_for_status()
            except httpx.HTTPStatusError as e:
                raise LLMError(f"Gemini error {e.response.status_code}: {e.response.text[:200]}") from e
            except httpx.HTTPError as e:
                raise LLMError(f"Gemini request failed: {e}") from e

            data = response.json()

        candidates = data.get("candidates") or []
        if not candidates:
            raise LLMError("Gemini returned no candidates")
        parts = candidates[0].get("content", {}).get("parts", [])
        return "".join(part.get("text", "") for part in parts)

    def is_available(self) -> bool:
        """Check if API key is configured."""
        return bool(self.api_key)
