"""
Sources Module - Retrieval Adapters

One adapter per SourceKind, built from settings.
"""

from typing import Dict, Optional

import httpx

from honig.schemas import SourceKind
from honig.sources.base import QuotaExceededError, SourceAdapter, SourceError, rank_score
from honig.sources.news import NewsAdapter
from honig.sources.serper import SerperSearch, SiteSearchAdapter
from honig.sources.wikipedia import WikipediaAdapter

__all__ = [
    "SourceAdapter",
    "SourceError",
    "QuotaExceededError",
    "rank_score",
    "WikipediaAdapter",
    "SerperSearch",
    "SiteSearchAdapter",
    "NewsAdapter",
    "build_adapters",
]


SITE_FILTERS = {
    SourceKind.COMMUNITY_QA_1: (["reddit.com"], 4),
    SourceKind.COMMUNITY_QA_2: (["quora.com"], 3),
    SourceKind.ACADEMIC: (["arxiv.org", "scholar.google.com", "researchgate.net"], 3),
    SourceKind.FORUMS: (["stackoverflow.com", "stackexchange.com", "discourse.org"], 3),
}


def build_adapters(
    settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> Dict[SourceKind, SourceAdapter]:
    """Build the fixed adapter registry, one entry per SourceKind."""
    web_search = SerperSearch(settings, transport)

    adapters: Dict[SourceKind, SourceAdapter] = {
        SourceKind.ENCYCLOPEDIA: WikipediaAdapter(settings, transport),
        SourceKind.NEWS: NewsAdapter(settings, web_search, transport),
    }
    for kind, (sites, max_results) in SITE_FILTERS.items():
        adapters[kind] = SiteSearchAdapter(kind, sites, max_results, web_search)

    return adapters
