"""
Sources - Serper Adapter

General web search API, backing the site-filtered source kinds.
"""

from typing import List, Optional, Sequence

import httpx

from honig.schemas import Candidate, ContentCategory, SourceKind
from honig.sources.base import QuotaExceededError, SourceAdapter, SourceError, rank_score


class SerperSearch:
    """Thin client over the Serper POST search endpoint."""

    def __init__(self, settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self.api_key = settings.search.serper_api_key
        self.timeout = settings.search.timeout_ms / 1000
        self.transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    async def search_raw(
        self,
        query: str,
        kind: SourceKind,
        max_results: int,
        category: ContentCategory = ContentCategory.WEB,
    ) -> List[Candidate]:
        """Run one query and map organic results to candidates."""
        if not self.configured:
            return []

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.post(
                self.settings.search.serper_url,
                json={"q": query, "num": max_results},
                headers={"X-API-KEY": self.api_key, "Content-Type": "application/json"},
            )

        if response.status_code in (402, 429):
            raise QuotaExceededError(kind, f"Serper quota exceeded ({response.status_code})")
        if response.status_code == 403:
            raise SourceError(kind, "Serper authentication failed (403)")
        if response.status_code != 200:
            raise SourceError(kind, f"Serper HTTP {response.status_code}")

        organic = response.json().get("organic") or []

        return [
            Candidate(
                title=item.get("title") or "",
                url=item["link"],
                snippet=item.get("snippet") or "",
                source_kind=kind,
                content_category=category,
                relevance_score=rank_score(rank),
                published_at=item.get("date"),
                metadata={
                    "position": item.get("position"),
                    "display_link": item.get("displayLink"),
                    "search_query": query,
                },
            )
            for rank, item in enumerate(organic[:max_results])
            if item.get("link")
        ]


class SiteSearchAdapter(SourceAdapter):
    """Site-filtered general search for one source kind."""

    def __init__(
        self,
        kind: SourceKind,
        sites: Sequence[str],
        max_results: int,
        web_search: SerperSearch,
    ):
        super().__init__(web_search.settings, web_search.transport)
        self.kind = kind
        self.sites = list(sites)
        self.max_results = max_results
        self.web_search = web_search

    @property
    def configured(self) -> bool:
        return self.web_search.configured

    def build_query(self, search_terms: List[str], refined_query: str) -> str:
        site_filter = " OR ".join(f"site:{site}" for site in self.sites)
        return f"{site_filter} {self._join_terms(search_terms, refined_query)}"

    async def search(self, search_terms: List[str], refined_query: str) -> List[Candidate]:
        if not self.configured:
            return []
        query = self.build_query(search_terms, refined_query)
        return await self.web_search.search_raw(query, self.kind, self.max_results)
