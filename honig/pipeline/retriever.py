"""
Pipeline - Source Retriever

Fans a query out to the requested source adapters and merges the results.
"""

import asyncio
import logging
from typing import Dict, Iterable, List, Optional

import httpx

from honig.config import get_settings
from honig.schemas import Candidate, SourceKind
from honig.sources import SourceAdapter, build_adapters


logger = logging.getLogger(__name__)


def merge_candidates(batches: Iterable[List[Candidate]], limit: int) -> List[Candidate]:
    """
    Merge per-source batches into one ranked list.

    Duplicate URLs are dropped (first occurrence wins), then candidates are
    sorted by relevance descending. The sort is stable, so equal scores keep
    their input order. The result is truncated to `limit`.
    """
    seen = set()
    merged: List[Candidate] = []
    for batch in batches:
        for candidate in batch:
            if candidate.url in seen:
                continue
            seen.add(candidate.url)
            merged.append(candidate)

    merged.sort(key=lambda c: c.relevance_score, reverse=True)
    return merged[:limit]


class SourceRetriever:
    """Multi-source retrieval with per-source failure isolation."""

    def __init__(
        self,
        settings=None,
        adapters: Optional[Dict[SourceKind, SourceAdapter]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.settings = settings or get_settings()
        self.adapters = adapters if adapters is not None else build_adapters(self.settings, transport)
        self.max_candidates = self.settings.search.max_candidates

    async def retrieve(
        self,
        search_terms: List[str],
        target_source_kinds: List[SourceKind],
        refined_query: str,
    ) -> List[Candidate]:
        """
        Retrieve candidates from every requested source kind.

        Args:
            search_terms: Key terms from the query processor
            target_source_kinds: Ordered source kinds to query
            refined_query: Search-optimized query text

        Returns:
            Merged, deduplicated candidates, highest relevance first
        """
        kinds = list(dict.fromkeys(target_source_kinds))
        logger.info(f"Retrieving from sources: {', '.join(k.value for k in kinds)}")

        batches = await asyncio.gather(
            *[self._retrieve_one(kind, search_terms, refined_query) for kind in kinds]
        )

        return merge_candidates(batches, self.max_candidates)

    async def _retrieve_one(
        self,
        kind: SourceKind,
        search_terms: List[str],
        refined_query: str,
    ) -> List[Candidate]:
        adapter = self.adapters.get(kind)
        if adapter is None or not adapter.configured:
            logger.debug(f"Source {kind.value} not configured, skipping")
            return []

        try:
            results = await adapter.search(search_terms, refined_query)
        except Exception as e:
            logger.warning(f"Failed to retrieve from {kind.value}: {e}")
            return []

        logger.debug(f"{kind.value}: {len(results)} candidates")
        return results

    def configured_kinds(self) -> List[SourceKind]:
        """Source kinds whose adapters have the credentials they need."""
        return [kind for kind, adapter in self.adapters.items() if adapter.configured]
