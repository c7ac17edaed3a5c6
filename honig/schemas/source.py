"""
Schemas - Candidate Models

A single retrieved reference produced by a source adapter.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from honig.schemas.query import SourceKind


class ContentCategory(str, Enum):
    KNOWLEDGE = "knowledge"
    NEWS = "news"
    WEB = "web"


class Candidate(BaseModel):
    """Search result scored at creation time. Never mutated afterwards."""
    title: str
    url: str
    snippet: str = ""
    source_kind: SourceKind
    content_category: ContentCategory = ContentCategory.WEB
    relevance_score: float = Field(0.0, ge=0.0, le=1.0)
    published_at: Optional[str] = None
    retrieved_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    metadata: Dict[str, Any] = {}

    model_config = {"frozen": True}

    @field_validator("relevance_score", mode="before")
    @classmethod
    def _clamp_score(cls, value: float) -> float:
        return max(0.0, min(1.0, float(value)))
