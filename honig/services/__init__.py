"""
Services Module - Business Logic Layer

Provides the answer engine, knowledge store access, and response caching.
"""

from honig.services.cache_service import CachedResponse, ResponseCache, normalize_query
from honig.services.knowledge_store import (
    InMemoryKnowledgeStore,
    KnowledgeStore,
    QdrantKnowledgeStore,
)
from honig.services.database_processor import DatabaseQueryProcessor, score_record
from honig.services.engine import Engine

__all__ = [
    "CachedResponse",
    "ResponseCache",
    "normalize_query",
    "KnowledgeStore",
    "InMemoryKnowledgeStore",
    "QdrantKnowledgeStore",
    "DatabaseQueryProcessor",
    "score_record",
    "Engine",
]
