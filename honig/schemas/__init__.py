"""
Schemas Module - Pydantic Models

Data models for queries, candidates, articles, and answers.
"""

from honig.schemas.query import Query, QueryType, SourceKind
from honig.schemas.source import Candidate, ContentCategory
from honig.schemas.article import ArticleMetadata, ExtractedArticle
from honig.schemas.answer import (
    AnswerEnvelope,
    DatabaseAnswer,
    Provenance,
    StageTimings,
    SynthesisResult,
)
from honig.schemas.knowledge import KnowledgeRecord

__all__ = [
    "Query",
    "QueryType",
    "SourceKind",
    "Candidate",
    "ContentCategory",
    "ArticleMetadata",
    "ExtractedArticle",
    "AnswerEnvelope",
    "DatabaseAnswer",
    "Provenance",
    "StageTimings",
    "SynthesisResult",
    "KnowledgeRecord",
]
