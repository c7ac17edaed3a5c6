"""
Schemas - Answer Models

The terminal response envelope and its parts.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from honig.schemas.query import QueryType, SourceKind
from honig.schemas.source import Candidate


class StageTimings(BaseModel):
    """Wall-clock duration of each pipeline stage in milliseconds."""
    database_check: int = 0
    query_processing: int = 0
    source_retrieval: int = 0
    content_scraping: int = 0
    synthesis: int = 0
    total: int = 0

    def stage_sum(self) -> int:
        return (
            self.database_check
            + self.query_processing
            + self.source_retrieval
            + self.content_scraping
            + self.synthesis
        )


class Provenance(BaseModel):
    """Which path produced the answer."""
    database_used: bool = False
    database_source: Optional[str] = None
    from_cache: bool = False
    live_pipeline: bool = False
    fallback_used: bool = False


class SynthesisResult(BaseModel):
    answer_text: str
    confidence: float = Field(ge=0.0, le=1.0)


class DatabaseAnswer(BaseModel):
    """Outcome of the knowledge store pre-check."""
    found: bool
    answer_text: Optional[str] = None
    confidence: float = Field(0.0, ge=0.0, le=1.0)
    source: str = "database"
    matched_count: int = 0


class AnswerEnvelope(BaseModel):
    """Answer with sources, confidence, timings and provenance."""
    answer_text: str
    sources: List[Candidate] = []
    confidence: float = Field(0.0, ge=0.0, le=1.0)
    stage_timings: StageTimings = Field(default_factory=StageTimings)
    provenance: Provenance = Field(default_factory=Provenance)
    original_query: str = ""
    refined_query: Optional[str] = None
    query_type: Optional[QueryType] = None
    target_sources: List[SourceKind] = []
    sources_retrieved: int = 0
    sources_scraped: int = 0

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_invariants(self) -> "AnswerEnvelope":
        if self.provenance.database_used and self.sources:
            raise ValueError("database answers cannot carry live sources")
        if self.stage_timings.total < self.stage_timings.stage_sum():
            raise ValueError("total timing is less than the sum of stages")
        return self
