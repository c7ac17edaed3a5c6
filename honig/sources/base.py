"""
Sources - Base Adapter

Shared contract and scoring for retrieval source adapters.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

import httpx

from honig.schemas import Candidate, SourceKind


class SourceError(Exception):
    """A source adapter call failed."""

    def __init__(self, kind: SourceKind, message: str):
        super().__init__(f"{kind.value}: {message}")
        self.kind = kind


class QuotaExceededError(SourceError):
    """The upstream API reports quota exhaustion or rate limiting."""


def rank_score(rank: int) -> float:
    """Descending relevance by result rank (0-based)."""
    return max(0.1, 0.9 - 0.1 * rank)


class SourceAdapter(ABC):
    """One retrieval source, dispatched by SourceKind."""

    kind: SourceKind

    def __init__(self, settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings
        self.timeout = settings.search.timeout_ms / 1000
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    @property
    def configured(self) -> bool:
        """Adapters without credentials are no-ops."""
        return True

    @abstractmethod
    async def search(self, search_terms: List[str], refined_query: str) -> List[Candidate]:
        """
        Retrieve candidates for a query.

        Args:
            search_terms: Key terms from the query processor
            refined_query: Search-optimized query text

        Returns:
            Candidates scored by rank
        """
        pass

    @staticmethod
    def _join_terms(search_terms: List[str], refined_query: str) -> str:
        terms = " ".join(t for t in search_terms if t.strip())
        return terms or refined_query
