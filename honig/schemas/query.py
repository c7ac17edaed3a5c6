"""
Schemas - Query Models

Classified query and the closed set of source kinds.
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class QueryType(str, Enum):
    """Intent class assigned by the query processor."""
    FACTUAL = "factual"
    OPINION = "opinion"
    NEWS = "news"
    TECHNICAL = "technical"
    GENERAL = "general"


class SourceKind(str, Enum):
    """Tag identifying a source adapter."""
    ENCYCLOPEDIA = "encyclopedia"
    COMMUNITY_QA_1 = "community-qa-1"
    COMMUNITY_QA_2 = "community-qa-2"
    NEWS = "news"
    ACADEMIC = "academic"
    FORUMS = "forums"

    @classmethod
    def parse(cls, value: str) -> "SourceKind":
        """Resolve a kind from its value or a well-known site alias."""
        key = value.strip().lower()
        if key in SOURCE_ALIASES:
            return SOURCE_ALIASES[key]
        return cls(key)


SOURCE_ALIASES = {
    "wikipedia": SourceKind.ENCYCLOPEDIA,
    "reddit": SourceKind.COMMUNITY_QA_1,
    "quora": SourceKind.COMMUNITY_QA_2,
}


class Query(BaseModel):
    """A classified user query. Created once per turn, never mutated."""
    original_text: str
    refined_text: str
    type: QueryType = QueryType.GENERAL
    target_source_kinds: List[SourceKind] = []
    search_terms: List[str] = []
    confidence: float = Field(0.7, ge=0.0, le=1.0)

    model_config = {"frozen": True}
