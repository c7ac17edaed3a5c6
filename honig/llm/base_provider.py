"""
LLM - Base Provider

Abstract base class for completion capability providers.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Literal, Optional


ErrorKind = Literal["authorization", "quota", "overloaded", "other"]

AUTHORIZATION_MARKERS = ("api key", "api_key", "401", "403", "permission", "unauthorized")
QUOTA_MARKERS = ("quota", "429", "rate limit", "resource_exhausted")
OVERLOADED_MARKERS = ("503", "overloaded", "unavailable")


def classify_llm_error(message: str) -> ErrorKind:
    """Classify a provider failure by substring matching on its message."""
    text = message.lower()
    if any(marker in text for marker in AUTHORIZATION_MARKERS):
        return "authorization"
    if any(marker in text for marker in QUOTA_MARKERS):
        return "quota"
    if any(marker in text for marker in OVERLOADED_MARKERS):
        return "overloaded"
    return "other"


class LLMError(Exception):
    """Completion call failed."""

    def __init__(self, message: str, kind: Optional[ErrorKind] = None):
        super().__init__(message)
        self.kind: ErrorKind = kind or classify_llm_error(message)


class BaseLLMProvider(ABC):
    """Base class for LLM provider implementations."""

    name = "base"

    @abstractmethod
    async def complete(
        self,
        prompt: str,
        max_tokens: int = 1000,
        temperature: float = 0.7,
        stop: Optional[List[str]] = None,
    ) -> str:
        """
        Generate completion from prompt.

        Args:
            prompt: Input prompt text
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature
            stop: Stop sequences

        Returns:
            Generated text
        """
        pass

    @abstractmethod
    async def chat(
        self,
        messages: List[Dict[str, str]],
        max_tokens: int = 1000,
        temperature: float = 0.7,
    ) -> str:
        """
        Generate chat completion.

        Args:
            messages: List of {"role": "...", "content": "..."} dicts
            max_tokens: Maximum tokens to generate
            temperature: Sampling temperature

        Returns:
            Assistant message content
        """
        pass

    async def generate(self, prompt: str) -> str:
        """Opaque text completion used by every pipeline stage."""
        return await self.complete(prompt)

    def is_available(self) -> bool:
        """Check if provider is available."""
        return True
