"""
LLM Module - Provider Abstraction Layer

Supports Gemini, OpenAI-compatible, and LM Studio providers.
"""

from honig.llm.base_provider import BaseLLMProvider, LLMError, classify_llm_error
from honig.llm.gemini_provider import GeminiProvider
from honig.llm.lm_studio_provider import LMStudioProvider
from honig.llm.openai_provider import OpenAIProvider

__all__ = [
    "BaseLLMProvider",
    "LLMError",
    "classify_llm_error",
    "GeminiProvider",
    "LMStudioProvider",
    "OpenAIProvider",
    "get_provider",
]


def get_provider(settings=None):
    """Factory function to get configured LLM provider."""
    from honig.config import get_settings
    settings = settings or get_settings()

    if settings.llm.provider == "gemini":
        return GeminiProvider(settings)
    elif settings.llm.provider == "openai":
        return OpenAIProvider(settings)
    elif settings.llm.provider == "lm_studio":
        return LMStudioProvider(settings)
    else:
        raise ValueError(f"Unknown LLM provider: {settings.llm.provider}")
