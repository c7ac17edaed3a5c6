"""
Unit Tests for Completion Providers
"""

import json

import httpx
import pytest

from honig.config import ConfigurationError, LLMSettings, Settings
from honig.llm import GeminiProvider, LMStudioProvider, OpenAIProvider, get_provider
from honig.llm.base_provider import LLMError, classify_llm_error


def llm_settings(**llm) -> Settings:
    return Settings(llm=LLMSettings(**llm))


class TestErrorClassification:
    """Tests for substring error classification."""

    @pytest.mark.parametrize("message,kind", [
        ("API key not valid. Please pass a valid API key.", "authorization"),
        ("Gemini error 403: permission denied", "authorization"),
        ("Gemini error 429: RESOURCE_EXHAUSTED", "quota"),
        ("You exceeded your current quota", "quota"),
        ("The model is overloaded", "overloaded"),
        ("connection reset", "other"),
    ])
    def test_classify(self, message, kind):
        """Test each error kind."""
        assert classify_llm_error(message) == kind

    def test_explicit_kind_wins(self):
        """Test an explicit kind overrides classification."""
        assert LLMError("quota", kind="other").kind == "other"


class TestProviderFactory:
    """Tests for get_provider."""

    def test_gemini(self):
        """Test the default provider."""
        provider = get_provider(llm_settings(LLM_API_KEY="key"))

        assert isinstance(provider, GeminiProvider)

    def test_openai(self):
        """Test the OpenAI-compatible provider."""
        provider = get_provider(llm_settings(LLM_PROVIDER="openai", LLM_API_KEY="key"))

        assert isinstance(provider, OpenAIProvider)

    def test_lm_studio_needs_no_key(self):
        """Test the local provider without credentials."""
        provider = get_provider(llm_settings(LLM_PROVIDER="lm_studio", LLM_API_KEY=None))

        assert isinstance(provider, LMStudioProvider)

    def test_missing_key(self):
        """Test hosted providers require an API key."""
        with pytest.raises(ConfigurationError):
            get_provider(llm_settings(LLM_PROVIDER="openai", LLM_API_KEY=None))


class TestGeminiProvider:
    """Tests for the Gemini REST provider."""

    @pytest.mark.asyncio
    async def test_generate(self):
        """Test request shape and reply parsing."""
        def handler(request):
            assert request.url.path.endswith("/models/gemini-2.0-flash:generateContent")
            assert request.headers["x-goog-api-key"] == "key"
            body = json.loads(request.content)
            assert body["contents"][0]["parts"][0]["text"] == "Say hi"
            return httpx.Response(200, json={"candidates": [
                {"content": {"parts": [{"text": "Hi"}, {"text": " there"}]}}
            ]})

        provider = GeminiProvider(llm_settings(LLM_API_KEY="key"), httpx.MockTransport(handler))

        assert await provider.generate("Say hi") == "Hi there"

    @pytest.mark.asyncio
    async def test_quota_error(self):
        """Test HTTP 429 becomes a quota LLMError."""
        transport = httpx.MockTransport(lambda r: httpx.Response(429, text="Resource exhausted"))
        provider = GeminiProvider(llm_settings(LLM_API_KEY="key"), transport)

        with pytest.raises(LLMError) as exc:
            await provider.generate("Say hi")

        assert exc.value.kind == "quota"

    @pytest.mark.asyncio
    async def test_no_candidates(self):
        """Test empty replies raise LLMError."""
        transport = httpx.MockTransport(lambda r: httpx.Response(200, json={"candidates": []}))
        provider = GeminiProvider(llm_settings(LLM_API_KEY="key"), transport)

        with pytest.raises(LLMError):
            await provider.generate("Say hi")


class TestOpenAIProvider:
    """Tests for the OpenAI-compatible provider."""

    @pytest.mark.asyncio
    async def test_generate(self):
        """Test bearer auth and reply parsing."""
        def handler(request):
            assert request.headers["Authorization"] == "Bearer key"
            return httpx.Response(200, json={"choices": [{"message": {"content": "Hello"}}]})

        settings = llm_settings(LLM_PROVIDER="openai", LLM_API_KEY="key", LLM_BASE_URL="https://api.example.com/v1")
        provider = OpenAIProvider(settings, httpx.MockTransport(handler))

        assert await provider.generate("Hi") == "Hello"

    @pytest.mark.asyncio
    async def test_unauthorized(self):
        """Test HTTP 401 becomes an authorization LLMError."""
        settings = llm_settings(LLM_PROVIDER="openai", LLM_API_KEY="bad", LLM_BASE_URL="https://api.example.com/v1")
        provider = OpenAIProvider(settings, httpx.MockTransport(lambda r: httpx.Response(401, text="nope")))

        with pytest.raises(LLMError) as exc:
            await provider.generate("Hi")

        assert exc.value.kind == "authorization"
