"""
Unit Tests for the Knowledge Store Pre-stage
"""

import pytest

from honig.schemas import KnowledgeRecord
from honig.services.database_processor import (
    INSUFFICIENT_SENTINEL,
    DatabaseQueryProcessor,
    score_record,
)
from honig.services.knowledge_store import InMemoryKnowledgeStore
from tests.conftest import StubProvider


def record(*triggers, text="Our office opens at 9am.", trigger_type="hours"):
    return KnowledgeRecord(trigger_words=list(triggers), trigger_type=trigger_type, response_text=text)


class FailingStore:
    async def fetch_all(self):
        raise ConnectionError("store down")


class TestScoring:
    """Tests for record relevance scoring."""

    def test_exact_match(self):
        """Test an exact trigger match saturates the score."""
        assert score_record("Opening Hours", record("opening hours")) == 1.0

    def test_containment(self):
        """Test a trigger contained in the query."""
        assert score_record("what are your opening hours today", record("opening hours")) == 1.0

    def test_word_overlap(self):
        """Test partial word overlap is proportional."""
        score = score_record("hours of the library", record("opening hours", "parking"))

        assert score == pytest.approx(5 / 20)

    def test_no_triggers(self):
        """Test records without triggers never match."""
        assert score_record("anything", record()) == 0.0


class TestFindRelevant:
    """Tests for match selection."""

    def test_threshold_and_order(self):
        """Test records above 0.3 are kept, best first."""
        records = [
            record("parking", trigger_type="parking"),
            record("opening hours", "weekend", "holidays", trigger_type="hours"),
            record("opening hours", trigger_type="exact"),
        ]

        matches = DatabaseQueryProcessor.find_relevant("opening hours", records)

        assert [m.record.trigger_type for m in matches] == ["exact", "hours"]

    def test_capped_at_ten(self):
        """Test at most ten matches are kept."""
        records = [record("opening hours") for _ in range(15)]

        assert len(DatabaseQueryProcessor.find_relevant("opening hours", records)) == 10


class TestTryAnswer:
    """Tests for the store-backed answer attempt."""

    @pytest.mark.asyncio
    async def test_hit(self):
        """Test a matching record produces an answer."""
        provider = StubProvider("We open at 9am.")
        processor = DatabaseQueryProcessor(InMemoryKnowledgeStore([record("opening hours")]), provider)

        result = await processor.try_answer_from_store("opening hours")

        assert result.found
        assert result.answer_text == "We open at 9am."
        assert result.confidence == 0.8
        assert result.matched_count == 1
        assert "Our office opens at 9am." in provider.prompts[0]

    @pytest.mark.asyncio
    async def test_sentinel_is_not_found(self):
        """Test the insufficiency sentinel means not found."""
        provider = StubProvider(INSUFFICIENT_SENTINEL)
        processor = DatabaseQueryProcessor(InMemoryKnowledgeStore([record("opening hours")]), provider)

        result = await processor.try_answer_from_store("opening hours")

        assert not result.found

    @pytest.mark.asyncio
    async def test_no_matches_skips_completion(self):
        """Test unrelated queries never call the completion capability."""
        provider = StubProvider("unused")
        processor = DatabaseQueryProcessor(InMemoryKnowledgeStore([record("opening hours")]), provider)

        result = await processor.try_answer_from_store("quantum computing")

        assert not result.found
        assert provider.prompts == []

    @pytest.mark.asyncio
    async def test_store_failure(self):
        """Test store errors mean not found."""
        processor = DatabaseQueryProcessor(FailingStore(), StubProvider("x"))

        result = await processor.try_answer_from_store("opening hours")

        assert not result.found

    @pytest.mark.asyncio
    async def test_completion_failure(self):
        """Test completion errors mean not found."""
        processor = DatabaseQueryProcessor(
            InMemoryKnowledgeStore([record("opening hours")]),
            StubProvider(RuntimeError("quota")),
        )

        result = await processor.try_answer_from_store("opening hours")

        assert not result.found
