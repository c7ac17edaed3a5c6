"""
LLM - LM Studio Provider

Local OpenAI-compatible server; no credentials.
"""

import httpx

from honig.llm.openai_provider import OpenAICompatibleProvider


class LMStudioProvider(OpenAICompatibleProvider):
    """LM Studio local LLM provider."""

    name = "lm_studio"

    def is_available(self) -> bool:
        """Probe the local server's model list."""
        try:
            with httpx.Client(timeout=2.0) as client:
                return client.get(f"{self.base_url}/models").status_code == 200
        except httpx.HTTPError:
            return False
