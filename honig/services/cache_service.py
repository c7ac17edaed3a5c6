"""
Services - Response Cache

Process-wide answer cache keyed by normalized query text, with fixed
capacity, oldest-entry eviction, and an age limit.
"""

import re
import threading
import time
from dataclasses import dataclass
from typing import Dict, Optional

from cachetools import FIFOCache

from honig.config import get_settings
from honig.schemas import AnswerEnvelope


@dataclass
class CachedResponse:
    """Cached answer with the time it was stored."""
    query: str
    envelope: AnswerEnvelope
    timestamp: float


def normalize_query(query: str) -> str:
    """Lower-case, strip punctuation, collapse whitespace."""
    text = re.sub(r"[^\w\s]", "", query.lower().strip())
    return re.sub(r"\s+", " ", text).strip()


class ResponseCache:
    """Best-effort answer cache. A lost race simply recomputes."""

    def __init__(self, settings=None):
        self.settings = settings or get_settings()
        self.enabled = self.settings.cache.enabled
        self.ttl = self.settings.cache.ttl_seconds
        self._lock = threading.Lock()
        self._cache: FIFOCache = FIFOCache(maxsize=self.settings.cache.max_entries)

    def get(self, query: str) -> Optional[CachedResponse]:
        """
        Get a cached answer.

        Args:
            query: Raw query text

        Returns:
            CachedResponse or None if missing or expired
        """
        if not self.enabled:
            return None

        key = normalize_query(query)
        with self._lock:
            entry = self._cache.get(key)
            if entry is None:
                return None
            if self._expired(entry):
                del self._cache[key]
                return None
            return entry

    def set(self, query: str, envelope: AnswerEnvelope) -> None:
        """Store an answer; the oldest entry is evicted when full."""
        if not self.enabled:
            return

        key = normalize_query(query)
        with self._lock:
            # Re-setting an existing key must not keep its old FIFO position
            self._cache.pop(key, None)
            self._cache[key] = CachedResponse(
                query=key, envelope=envelope, timestamp=time.time()
            )

    def find_similar(self, query: str, threshold: float = 0.7) -> Optional[CachedResponse]:
        """Best live entry whose word-set Jaccard similarity exceeds threshold."""
        if not self.enabled:
            return None

        words = set(normalize_query(query).split())
        best: Optional[CachedResponse] = None
        best_score = 0.0

        with self._lock:
            for entry in list(self._cache.values()):
                if self._expired(entry):
                    continue
                score = _jaccard(words, set(entry.query.split()))
                if score > threshold and score > best_score:
                    best, best_score = entry, score

        return best

    def clear(self) -> None:
        """Clear all entries."""
        with self._lock:
            self._cache.clear()

    def stats(self) -> Dict[str, object]:
        """Get cache statistics."""
        return {
            "size": len(self._cache),
            "maxsize": self._cache.maxsize,
            "ttl": self.ttl,
            "enabled": self.enabled,
        }

    def _expired(self, entry: CachedResponse) -> bool:
        return time.time() - entry.timestamp > self.ttl


def _jaccard(a: set, b: set) -> float:
    union = a | b
    if not union:
        return 0.0
    return len(a & b) / len(union)
