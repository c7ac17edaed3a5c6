"""
Pipeline - Import Responses

CLI entry point for loading trigger/response records into the knowledge store.
"""

import argparse
import hashlib
import json
import logging
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from qdrant_client import QdrantClient
from qdrant_client.models import (
    PayloadSchemaType,
    PointStruct,
    SparseIndexParams,
    SparseVector,
    SparseVectorParams,
)

from honig.config import configure_logging, get_settings
from honig.schemas import KnowledgeRecord


logger = logging.getLogger(__name__)


SPARSE_VECTOR_NAME = "triggers"
RECORD_NAMESPACE = uuid.UUID("6f1b8f0e-2d4a-4c59-9a57-5e1c3f0d7b21")


def record_id(record: KnowledgeRecord) -> str:
    """Deterministic point ID from trigger type and words."""
    key = record.trigger_type + "|" + "|".join(sorted(w.lower().strip() for w in record.trigger_words))
    return str(uuid.uuid5(RECORD_NAMESPACE, key))


def trigger_vector(record: KnowledgeRecord) -> Dict[str, List[Any]]:
    """Sparse term-count vector over the record's trigger words."""
    counts: Dict[int, float] = {}
    for phrase in record.trigger_words:
        for term in phrase.lower().split():
            index = int(hashlib.sha256(term.encode()).hexdigest()[:7], 16)
            counts[index] = counts.get(index, 0.0) + 1.0

    indices = sorted(counts)
    return {"indices": indices, "values": [counts[i] for i in indices]}


def load_records(path: Path) -> List[KnowledgeRecord]:
    """Load a JSON array of records, skipping invalid entries."""
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON array of records")

    records = []
    for i, item in enumerate(data):
        try:
            records.append(KnowledgeRecord.model_validate(item))
        except ValidationError as e:
            logger.warning(f"Skipping record {i}: {e.error_count()} validation errors")
    return records


class ResponseImporter:
    """Writes knowledge records into a Qdrant collection."""

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

    def ensure_collection(self, recreate: bool = False) -> None:
        """Create the collection if it doesn't exist."""
        exists = self.client.collection_exists(self.collection)

        if exists and recreate:
            logger.info(f"Dropping collection {self.collection}")
            self.client.delete_collection(self.collection)
            exists = False

        if not exists:
            self.client.create_collection(
                collection_name=self.collection,
                vectors_config={},
                sparse_vectors_config={
                    SPARSE_VECTOR_NAME: SparseVectorParams(
                        index=SparseIndexParams(on_disk=False)
                    )
                },
            )
            self.client.create_payload_index(
                collection_name=self.collection,
                field_name="trigger_type",
                field_schema=PayloadSchemaType.KEYWORD,
            )

    def import_records(self, records: List[KnowledgeRecord]) -> Dict[str, int]:
        """
        Upsert records.

        Args:
            records: Records to store; re-importing a record overwrites it

        Returns:
            Statistics dict
        """
        points = [
            PointStruct(
                id=record_id(record),
                vector={SPARSE_VECTOR_NAME: SparseVector(**trigger_vector(record))},
                payload={
                    "trigger_words": record.trigger_words,
                    "trigger_type": record.trigger_type,
                    "response_text": record.response_text,
                },
            )
            for record in records
            if record.trigger_words and record.response_text.strip()
        ]

        if points:
            self.client.upsert(
                collection_name=self.collection,
                points=points,
            )

        return {"imported": len(points), "skipped": len(records) - len(points)}


def main():
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Import trigger/response records")
    parser.add_argument("file", type=Path, help="JSON array of records")
    parser.add_argument(
        "--recreate",
        action="store_true",
        help="Drop and recreate the collection first",
    )
    args = parser.parse_args()

    settings = get_settings()
    configure_logging(settings)

    records = load_records(args.file)
    logger.info(f"Loaded {len(records)} records from {args.file}")

    importer = ResponseImporter(settings)
    importer.ensure_collection(recreate=args.recreate)
    stats = importer.import_records(records)

    logger.info(f"Import complete: {stats}")


if __name__ == "__main__":
    main()
