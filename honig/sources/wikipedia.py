"""
Sources - Wikipedia Adapter

Encyclopedia search through the public MediaWiki API.
"""

from typing import List
from urllib.parse import quote

from bs4 import BeautifulSoup

from honig.schemas import Candidate, ContentCategory, SourceKind
from honig.sources.base import SourceAdapter, SourceError, rank_score


class WikipediaAdapter(SourceAdapter):
    """Encyclopedia adapter. Needs no credentials."""

    kind = SourceKind.ENCYCLOPEDIA
    max_results = 3

    async def search(self, search_terms: List[str], refined_query: str) -> List[Candidate]:
        query = self._join_terms(search_terms, refined_query)
        params = {
            "action": "query",
            "list": "search",
            "srsearch": query,
            "format": "json",
            "srlimit": self.max_results,
        }

        async with self._client() as client:
            response = await client.get(self.settings.search.wikipedia_api_url, params=params)
            if response.status_code != 200:
                raise SourceError(self.kind, f"HTTP {response.status_code}")
            data = response.json()

        items = (data.get("query") or {}).get("search") or []

        return [
            Candidate(
                title=item["title"],
                url=self._article_url(item["title"]),
                snippet=self._strip_markup(item.get("snippet", "")),
                source_kind=self.kind,
                content_category=ContentCategory.KNOWLEDGE,
                relevance_score=rank_score(rank),
                published_at=item.get("timestamp"),
                metadata={
                    "wordcount": item.get("wordcount"),
                    "timestamp": item.get("timestamp"),
                    "search_query": query,
                },
            )
            for rank, item in enumerate(items[:self.max_results])
        ]

    @staticmethod
    def _article_url(title: str) -> str:
        return f"https://en.wikipedia.org/wiki/{quote(title.replace(' ', '_'))}"

    @staticmethod
    def _strip_markup(snippet: str) -> str:
        return BeautifulSoup(snippet, "html.parser").get_text().strip()
