"""
Sources - News Adapter

NewsAPI first, general web search scoped to news as fallback.
"""

import logging
from typing import List, Optional

import httpx

from honig.schemas import Candidate, ContentCategory, SourceKind
from honig.sources.base import SourceAdapter, SourceError, rank_score
from honig.sources.serper import SerperSearch


logger = logging.getLogger(__name__)

# NewsAPI answers 426 when the plan quota is exhausted, 429 when rate limited
QUOTA_STATUSES = {426, 429}


class NewsAdapter(SourceAdapter):
    """News adapter with web-search fallback."""

    kind = SourceKind.NEWS
    max_results = 5

    def __init__(
        self,
        settings,
        web_search: SerperSearch,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(settings, transport)
        self.api_key = settings.search.news_api_key
        self.web_search = web_search

    @property
    def configured(self) -> bool:
        return bool(self.api_key) or self.web_search.configured

    async def search(self, search_terms: List[str], refined_query: str) -> List[Candidate]:
        query = self._join_terms(search_terms, refined_query)
        results: List[Candidate] = []

        if self.api_key:
            try:
                results = await self.search_news_api(query)
            except (SourceError, httpx.HTTPError) as e:
                logger.warning(f"NewsAPI search failed: {e}")

        if not results and self.web_search.configured:
            logger.info("Falling back to web search for news")
            results = await self.web_search.search_raw(
                query, self.kind, self.max_results, ContentCategory.NEWS
            )

        return results

    async def search_news_api(self, query: str) -> List[Candidate]:
        """Query NewsAPI. Quota exhaustion yields no results, not an error."""
        params = {
            "q": query,
            "pageSize": self.max_results,
            "sortBy": "relevancy",
            "language": "en",
        }

        async with self._client() as client:
            response = await client.get(
                self.settings.search.news_api_url,
                params=params,
                headers={"X-Api-Key": self.api_key},
            )

        if response.status_code in QUOTA_STATUSES:
            logger.warning("NewsAPI quota exceeded, skipping NewsAPI search")
            return []
        if response.status_code != 200:
            raise SourceError(self.kind, f"NewsAPI HTTP {response.status_code}")

        articles = response.json().get("articles") or []

        return [
            Candidate(
                title=article.get("title") or "",
                url=article["url"],
                snippet=article.get("description") or "",
                source_kind=self.kind,
                content_category=ContentCategory.NEWS,
                relevance_score=rank_score(rank),
                published_at=article.get("publishedAt"),
                metadata={
                    "author": article.get("author"),
                    "source_name": (article.get("source") or {}).get("name"),
                    "image_url": article.get("urlToImage"),
                    "search_query": query,
                },
            )
            for rank, article in enumerate(articles[:self.max_results])
            if article.get("url")
        ]
