"""
Integration Tests for the MCP Server
"""

import threading

import httpx
import pytest
from fastmcp import Client

from honig.pipeline.scraper import WebScraper
from honig.server import create_app
from honig.services import Engine
from honig.tools import deps
from tests.conftest import StubProvider, make_settings


@pytest.fixture
def app():
    """Server with a stub-backed shared engine."""
    deps.set_engine(Engine(StubProvider("Direct answer."), settings=make_settings()))
    yield create_app()
    deps.set_engine(None)


class TestServer:
    """Tests for tool registration and calls."""

    @pytest.mark.asyncio
    async def test_tools_registered(self, app):
        """Test every tool is exposed."""
        async with Client(app) as client:
            names = {t.name for t in await client.list_tools()}

        assert names == {
            "ask_question",
            "classify_query",
            "search_sources",
            "extract_page",
            "engine_status",
        }

    @pytest.mark.asyncio
    async def test_classify_query(self, app):
        """Test classification falls back to heuristics on a non-JSON reply."""
        async with Client(app) as client:
            result = await client.call_tool("classify_query", {"query": "What is quantum computing?"})

        assert result.data["type"] == "factual"
        assert "encyclopedia" in result.data["target_source_kinds"]

    @pytest.mark.asyncio
    async def test_ask_question_direct(self, app):
        """Test a conversational question is answered directly."""
        async with Client(app) as client:
            result = await client.call_tool("ask_question", {"question": "hello"})

        assert result.data["answer_text"] == "Direct answer."
        assert result.data["sources"] == []

    @pytest.mark.asyncio
    async def test_extract_page_blocked(self, app):
        """Test blocked URLs return a failure dict."""
        async with Client(app) as client:
            result = await client.call_tool("extract_page", {"url": "https://reddit.com/r/python"})

        assert result.data["error"]["kind"] == "blocked"

    @pytest.mark.asyncio
    async def test_engine_status(self, app):
        """Test configuration and cache status."""
        async with Client(app) as client:
            result = await client.call_tool("engine_status", {})

        assert result.data["configuration"]["has_completion"] is True
        assert result.data["cache"]["enabled"] is True

    @pytest.mark.asyncio
    async def test_engine_status_probes_off_event_loop(self):
        """Test the provider availability check runs in a worker thread."""
        threads = []

        class ProbingProvider(StubProvider):
            def is_available(self):
                threads.append(threading.get_ident())
                return False

        deps.set_engine(Engine(ProbingProvider(), settings=make_settings()))
        try:
            async with Client(create_app()) as client:
                result = await client.call_tool("engine_status", {})
        finally:
            deps.set_engine(None)

        assert result.data["configuration"]["has_completion"] is False
        assert threads and threads[0] != threading.get_ident()

    @pytest.mark.asyncio
    async def test_extract_page_http_error(self):
        """Test httpx errors outside transport failures come back as a failure dict."""
        def handler(request):
            raise httpx.TooManyRedirects("Exceeded maximum allowed redirects.", request=request)

        settings = make_settings()
        scraper = WebScraper(settings, transport=httpx.MockTransport(handler))
        deps.set_engine(Engine(StubProvider(), settings=settings, scraper=scraper))
        try:
            async with Client(create_app()) as client:
                result = await client.call_tool("extract_page", {"url": "https://example.com/loop"})
        finally:
            deps.set_engine(None)

        assert result.data["error"]["kind"] == "transport"
