"""
Unit Tests for the Response Cache
"""

from unittest.mock import patch

from honig.config import CacheSettings, Settings
from honig.schemas import AnswerEnvelope
from honig.services.cache_service import ResponseCache, normalize_query


def make_cache(**cache) -> ResponseCache:
    return ResponseCache(Settings(cache=CacheSettings(**cache)))


def envelope(text="answer") -> AnswerEnvelope:
    return AnswerEnvelope(answer_text=text)


class TestNormalize:
    """Tests for cache key normalization."""

    def test_normalize(self):
        """Test case, punctuation and whitespace are ignored."""
        assert normalize_query("  What IS   Python?! ") == "what is python"


class TestResponseCache:
    """Tests for ResponseCache."""

    def test_set_get(self):
        """Test basic cache operations."""
        cache = make_cache()
        cache.set("What is Python?", envelope())

        result = cache.get("what is python")

        assert result is not None
        assert result.envelope.answer_text == "answer"

    def test_cache_disabled(self):
        """Test cache when disabled."""
        cache = make_cache(CACHE_ENABLED=False)
        cache.set("query", envelope())

        assert cache.get("query") is None

    def test_oldest_evicted(self):
        """Test the oldest entry is evicted at capacity."""
        cache = make_cache(CACHE_MAX_ENTRIES=2)
        cache.set("one", envelope("1"))
        cache.set("two", envelope("2"))
        cache.set("three", envelope("3"))

        assert cache.get("one") is None
        assert cache.get("two").envelope.answer_text == "2"
        assert cache.get("three").envelope.answer_text == "3"

    def test_expired_entries_dropped(self):
        """Test entries older than the TTL are treated as missing."""
        cache = make_cache(CACHE_TTL_SECONDS=300)

        with patch("honig.services.cache_service.time.time", return_value=1000.0):
            cache.set("query", envelope())
        with patch("honig.services.cache_service.time.time", return_value=1301.0):
            assert cache.get("query") is None

        assert cache.stats()["size"] == 0

    def test_find_similar(self):
        """Test Jaccard similarity lookup."""
        cache = make_cache()
        cache.set("how do bees make honey", envelope("bees"))
        cache.set("weather in paris", envelope("paris"))

        assert cache.find_similar("how do bees make honey today").envelope.answer_text == "bees"
        assert cache.find_similar("stock prices") is None

    def test_clear_and_stats(self):
        """Test clearing and statistics."""
        cache = make_cache(CACHE_MAX_ENTRIES=5)
        cache.set("a query", envelope())

        assert cache.stats() == {"size": 1, "maxsize": 5, "ttl": 300, "enabled": True}
        cache.clear()
        assert cache.stats()["size"] == 0
