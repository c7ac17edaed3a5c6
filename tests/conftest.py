"""
Shared fixtures: a deterministic completion provider and settings.
"""

from typing import Callable, Dict, List, Optional, Union

import pytest

from honig.config import (
    CacheSettings,
    EngineSettings,
    SearchSettings,
    Settings,
)
from honig.llm.base_provider import BaseLLMProvider


class StubProvider(BaseLLMProvider):
    """Returns canned replies and records every prompt."""

    name = "stub"

    def __init__(self, reply: Union[str, Callable[[str], str], Exception] = ""):
        self.reply = reply
        self.prompts: List[str] = []

    async def complete(self, prompt, max_tokens=1000, temperature=0.7, stop=None) -> str:
        self.prompts.append(prompt)
        if isinstance(self.reply, Exception):
            raise self.reply
        if callable(self.reply):
            return self.reply(prompt)
        return self.reply

    async def chat(self, messages: List[Dict[str, str]], max_tokens=1000, temperature=0.7) -> str:
        return await self.complete(messages[-1]["content"], max_tokens, temperature)


def make_settings(
    serper_key: Optional[str] = None,
    news_key: Optional[str] = None,
    **engine,
) -> Settings:
    return Settings(
        search=SearchSettings(SERPER_API_KEY=serper_key, NEWS_API_KEY=news_key),
        engine=EngineSettings(**engine),
        cache=CacheSettings(),
    )


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def search_settings() -> Settings:
    return make_settings(serper_key="serper-key", news_key="news-key")
