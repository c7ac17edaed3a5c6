"""
Services - Database Query Processor

Answers from the private knowledge store before any live retrieval.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from honig.llm.base_provider import BaseLLMProvider
from honig.schemas import DatabaseAnswer, KnowledgeRecord
from honig.services.knowledge_store import KnowledgeStore


logger = logging.getLogger(__name__)


INSUFFICIENT_SENTINEL = "INSUFFICIENT_DATABASE_INFO"
MATCH_THRESHOLD = 0.3
MAX_MATCHES = 10
HIT_CONFIDENCE = 0.8

EXACT_MATCH_POINTS = 25
CONTAINMENT_POINTS = 15
WORD_OVERLAP_POINTS = 10

DATABASE_PROMPT = """You answer questions using a database of pre-written responses. Answer the user's query using ONLY the information in the database responses below.

USER QUERY: "{query}"

AVAILABLE DATABASE RESPONSES:
{context}

INSTRUCTIONS:
1. Answer the user's query using ONLY the information from the database responses above
2. You can combine and synthesize information from multiple database responses
3. Do not make up information that is not in the database responses
4. If the database responses do NOT contain enough information to properly answer the query, respond with exactly: "{sentinel}"
5. Keep the response natural and conversational

Provide your response:"""


@dataclass
class ScoredRecord:
    record: KnowledgeRecord
    score: float


def score_record(query: str, record: KnowledgeRecord) -> float:
    """
    Relevance of one record to a query, normalized to [0, 1].

    Each trigger phrase contributes 25 for an exact match, 15 for
    containment in either direction, otherwise up to 10 by word overlap.
    The sum is divided by 10 per trigger phrase and capped at 1.
    """
    query = query.lower().strip()
    query_words = query.split()
    triggers = [t.lower().strip() for t in record.trigger_words if t and t.strip()]

    max_score = len(triggers) * WORD_OVERLAP_POINTS
    if max_score == 0:
        return 0.0

    score = 0.0
    for trigger in triggers:
        if query == trigger:
            score += EXACT_MATCH_POINTS
            continue

        if trigger in query or query in trigger:
            score += CONTAINMENT_POINTS
            continue

        trigger_words = trigger.split()
        matches = sum(1 for word in trigger_words if word in query_words)
        if matches:
            score += (matches / len(trigger_words)) * WORD_OVERLAP_POINTS

    return min(1.0, score / max_score)


class DatabaseQueryProcessor:
    """Knowledge-store pre-stage."""

    def __init__(self, store: KnowledgeStore, llm_provider: Optional[BaseLLMProvider]):
        self.store = store
        self.llm_provider = llm_provider

    async def try_answer_from_store(self, query: str) -> DatabaseAnswer:
        """
        Try to answer from stored records.

        Any failure, no qualifying records, or a sentinel reply means
        "not found"; the caller proceeds to live retrieval.
        """
        not_found = DatabaseAnswer(found=False, confidence=0.0)

        try:
            records = await self.store.fetch_all()
        except Exception as e:
            logger.warning(f"Knowledge store query failed: {e}")
            return not_found

        matches = self.find_relevant(query, records)
        if not matches:
            logger.info("No relevant database responses found")
            return not_found

        logger.info(f"Found {len(matches)} relevant database responses")

        answer = await self._synthesize(query, matches)
        if answer is None:
            return not_found

        return DatabaseAnswer(
            found=True,
            answer_text=answer,
            confidence=HIT_CONFIDENCE,
            source="knowledge_synthesis",
            matched_count=len(matches),
        )

    @staticmethod
    def find_relevant(query: str, records: List[KnowledgeRecord]) -> List[ScoredRecord]:
        """Records scoring above the threshold, best first, at most 10."""
        scored = [ScoredRecord(record=r, score=score_record(query, r)) for r in records]
        relevant = [s for s in scored if s.score > MATCH_THRESHOLD]
        relevant.sort(key=lambda s: s.score, reverse=True)
        return relevant[:MAX_MATCHES]

    async def _synthesize(self, query: str, matches: List[ScoredRecord]) -> Optional[str]:
        if self.llm_provider is None:
            return None

        context = "\n\n---\n\n".join(
            f"[Database Response {i} - Type: {m.record.trigger_type}]\n{m.record.response_text}"
            for i, m in enumerate(matches, start=1)
        )
        prompt = DATABASE_PROMPT.format(
            query=query, context=context, sentinel=INSUFFICIENT_SENTINEL
        )

        try:
            reply = (await self.llm_provider.generate(prompt)).strip()
        except Exception as e:
            logger.warning(f"Failed to synthesize from database: {e}")
            return None

        if not reply or INSUFFICIENT_SENTINEL in reply:
            logger.info("Database info is insufficient for this query")
            return None

        return reply
