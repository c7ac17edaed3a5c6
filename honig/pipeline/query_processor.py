"""
Pipeline - Query Processor

Classifies a raw query into a type, target sources, and search terms.
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional

from honig.llm.base_provider import BaseLLMProvider
from honig.schemas import Query, QueryType, SourceKind


logger = logging.getLogger(__name__)


DEFAULT_SOURCES = [SourceKind.ENCYCLOPEDIA, SourceKind.NEWS]
DEFAULT_CONFIDENCE = 0.7
FALLBACK_CONFIDENCE = 0.6

# (type, phrases, sources) checked in order; first phrase hit wins
HEURISTIC_RULES = [
    (
        QueryType.FACTUAL,
        ("what is", "define", "who is"),
        [SourceKind.ENCYCLOPEDIA, SourceKind.ACADEMIC],
    ),
    (
        QueryType.OPINION,
        ("opinion", "review", "experience"),
        [SourceKind.COMMUNITY_QA_1, SourceKind.COMMUNITY_QA_2, SourceKind.FORUMS],
    ),
    (
        QueryType.NEWS,
        ("latest", "recent", "news"),
        [SourceKind.NEWS],
    ),
    (
        QueryType.TECHNICAL,
        ("code", "programming", "technical"),
        [SourceKind.ACADEMIC, SourceKind.FORUMS],
    ),
]

CLASSIFICATION_PROMPT = """You are a query analysis engine. Analyze the user's query and provide a structured response.

User Query: "{query}"

Respond with a JSON object containing:
1. refinedQuery: A more precise, search-optimized version of the query
2. queryType: One of "factual", "opinion", "news", "technical", "general"
3. targetSources: Array of recommended source types from {sources}
4. searchTerms: Array of 3-5 key search terms
5. confidence: Confidence score (0-1) in the analysis

Query Type Guidelines:
- "factual": Seeking objective facts, definitions, or data (use encyclopedia, academic sources)
- "opinion": Seeking perspectives, experiences, reviews (use community Q&A and forums)
- "news": Current events, recent developments (use news sources)
- "technical": Programming, science, engineering topics (use academic, forums)
- "general": Broad topics needing multiple perspectives (use mixed sources)

Respond ONLY with valid JSON:"""


class ClassificationError(ValueError):
    """The completion reply did not contain a usable JSON object."""


class QueryProcessor:
    """LLM query classification with a keyword-heuristic fallback."""

    def __init__(self, llm_provider: Optional[BaseLLMProvider] = None):
        self.llm_provider = llm_provider

    async def classify(self, raw_query: str) -> Query:
        """
        Classify a raw query.

        Never raises: any completion or parse failure falls back to
        heuristic classification.
        """
        if self.llm_provider is None:
            return self.heuristic_classify(raw_query)

        try:
            reply = await self.llm_provider.generate(self._build_prompt(raw_query))
            parsed = self._parse_reply(reply)
            return self._from_parsed(raw_query, parsed)
        except Exception as e:
            logger.warning(f"Query classification failed, using heuristics: {e}")
            return self.heuristic_classify(raw_query)

    def _build_prompt(self, raw_query: str) -> str:
        sources = json.dumps([kind.value for kind in SourceKind])
        return CLASSIFICATION_PROMPT.format(query=raw_query, sources=sources)

    @staticmethod
    def _parse_reply(reply: str) -> Dict[str, Any]:
        match = re.search(r"\{[\s\S]*\}", reply or "")
        if not match:
            raise ClassificationError("No valid JSON found in response")
        parsed = json.loads(match.group(0))
        if not isinstance(parsed, dict):
            raise ClassificationError("Classification reply is not a JSON object")
        return parsed

    def _from_parsed(self, raw_query: str, parsed: Dict[str, Any]) -> Query:
        refined = parsed.get("refinedQuery")
        if not isinstance(refined, str) or not refined.strip():
            refined = raw_query

        try:
            query_type = QueryType(str(parsed.get("queryType", "general")).lower())
        except ValueError:
            query_type = QueryType.GENERAL

        return Query(
            original_text=raw_query,
            refined_text=refined.strip(),
            type=query_type,
            target_source_kinds=self._parse_sources(parsed.get("targetSources")),
            search_terms=self._parse_terms(parsed.get("searchTerms"), raw_query),
            confidence=self._parse_confidence(parsed.get("confidence")),
        )

    @staticmethod
    def _parse_sources(value: Any) -> List[SourceKind]:
        if not isinstance(value, list):
            return list(DEFAULT_SOURCES)

        kinds: List[SourceKind] = []
        for item in value:
            try:
                kind = SourceKind.parse(str(item))
            except ValueError:
                continue
            if kind not in kinds:
                kinds.append(kind)

        return kinds or list(DEFAULT_SOURCES)

    @staticmethod
    def _parse_terms(value: Any, raw_query: str) -> List[str]:
        if isinstance(value, list):
            terms = [str(t).strip() for t in value if str(t).strip()]
            if terms:
                return terms
        return raw_query.split()

    @staticmethod
    def _parse_confidence(value: Any) -> float:
        try:
            confidence = float(value)
        except (TypeError, ValueError):
            return DEFAULT_CONFIDENCE
        return max(0.0, min(1.0, confidence))

    # ─────────────────────────────────────────────
    #  Heuristic fallback
    # ─────────────────────────────────────────────

    @staticmethod
    def heuristic_classify(raw_query: str) -> Query:
        """Deterministic keyword classification. Never fails."""
        text = (raw_query or "").lower()

        query_type = QueryType.GENERAL
        sources = list(DEFAULT_SOURCES)
        for rule_type, phrases, rule_sources in HEURISTIC_RULES:
            if any(phrase in text for phrase in phrases):
                query_type = rule_type
                sources = list(rule_sources)
                break

        terms = [word for word in (raw_query or "").split() if len(word) > 2][:5]

        return Query(
            original_text=raw_query or "",
            refined_text=raw_query or "",
            type=query_type,
            target_source_kinds=sources,
            search_terms=terms,
            confidence=FALLBACK_CONFIDENCE,
        )
