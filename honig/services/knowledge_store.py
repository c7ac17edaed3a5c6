"""
Services - Knowledge Store

Read access to the private trigger/response records.
"""

import asyncio
from typing import List, Optional, Protocol

from qdrant_client import QdrantClient

from honig.config import get_settings
from honig.schemas import KnowledgeRecord


class KnowledgeStore(Protocol):
    """Anything that can return every stored record."""

    async def fetch_all(self) -> List[KnowledgeRecord]:
        ...


class InMemoryKnowledgeStore:
    """Fixed list of records."""

    def __init__(self, records: Optional[List[KnowledgeRecord]] = None):
        self.records = list(records or [])

    async def fetch_all(self) -> List[KnowledgeRecord]:
        return list(self.records)


class QdrantKnowledgeStore:
    """Records stored as point payloads in a Qdrant collection."""

    SCROLL_BATCH = 256

    def __init__(self, settings=None, client: Optional[QdrantClient] = None):
        self.settings = settings or get_settings()
        self.collection = self.settings.knowledge.collection
        self._client = client

    @property
    def client(self) -> QdrantClient:
        """Lazy load Qdrant client."""
        if self._client is None:
            self._client = QdrantClient(
                host=self.settings.knowledge.host,
                port=self.settings.knowledge.port,
                api_key=self.settings.knowledge.api_key,
            )
        return self._client

    async def fetch_all(self) -> List[KnowledgeRecord]:
        """Scroll through the whole collection."""
        return await asyncio.to_thread(self._scroll_all)

    def _scroll_all(self) -> List[KnowledgeRecord]:
        records: List[KnowledgeRecord] = []
        offset = None

        while True:
            points, offset = self.client.scroll(
                collection_name=self.collection,
                limit=self.SCROLL_BATCH,
                offset=offset,
                with_payload=True,
                with_vectors=False,
            )
            for point in points:
                payload = point.payload or {}
                records.append(KnowledgeRecord(
                    id=str(point.id),
                    trigger_words=payload.get("trigger_words", []),
                    trigger_type=payload.get("trigger_type", ""),
                    response_text=payload.get("response_text", ""),
                ))
            if offset is None:
                break

        return records
