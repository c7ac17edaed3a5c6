"""
Services - Answer Engine

Sequences the answer pipeline:
Cache → (Database check) → Classify → Retrieve → Scrape → Synthesize,
with a pipeline timeout that falls back to a direct completion.
"""

import asyncio
import logging
import re
import time
from typing import Dict, List, Optional

from honig.config import ConfigurationError, get_settings
from honig.llm import get_provider
from honig.llm.base_provider import BaseLLMProvider, LLMError
from honig.pipeline.query_processor import QueryProcessor
from honig.pipeline.retriever import SourceRetriever
from honig.pipeline.scraper import WebScraper
from honig.pipeline.summarizer import ContentSummarizer
from honig.schemas import (
    AnswerEnvelope,
    Candidate,
    ExtractedArticle,
    Provenance,
    SourceKind,
    StageTimings,
)
from honig.services.cache_service import ResponseCache
from honig.services.database_processor import DatabaseQueryProcessor
from honig.services.knowledge_store import KnowledgeStore, QdrantKnowledgeStore


logger = logging.getLogger(__name__)


APOLOGY_MESSAGE = (
    "I apologize, but I'm experiencing technical difficulties. Please try again."
)
AUTHORIZATION_MESSAGE = (
    "Configuration issue detected. Please check the completion service API key."
)
QUOTA_MESSAGE = "Usage limit reached. Please try again in a few minutes."
FAILURE_MESSAGES = (APOLOGY_MESSAGE, AUTHORIZATION_MESSAGE, QUOTA_MESSAGE)
DIRECT_FALLBACK_CONFIDENCE = 0.5

DIRECT_PROMPT = "You are a helpful assistant. Provide a helpful, concise response to: {query}"

SIMPLE_PATTERNS = [
    re.compile(r"^(hi|hello|hey|thanks|thank you|bye|goodbye)$", re.I),
    re.compile(r"^(who are you|what are you|how are you)$", re.I),
    re.compile(r"^(help|what can you do|capabilities)$", re.I),
]

LIVE_DATA_PATTERNS = [
    re.compile(r"\b(latest|recent|current|news|today|this week|this month)\b", re.I),
    re.compile(r"\b(what happened|breaking|update|development)\b", re.I),
    re.compile(r"\b(price|stock|market|crypto|bitcoin)\b", re.I),
    re.compile(r"\b(weather|forecast|temperature)\b", re.I),
    re.compile(r"\b(compare|vs|versus|difference between)\b", re.I),
    re.compile(r"\b(review|opinion|what do people think)\b", re.I),
]

CONVERSATIONAL_PATTERNS = [
    re.compile(r"^(what is|define|explain|tell me about|how does|why does)", re.I),
    re.compile(r"^(can you|could you|would you|will you)", re.I),
    re.compile(r"\b(help|assist|support)\b", re.I),
]


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)


class Engine:
    """
    Retrieval-augmented answer engine.

    Components are injected so the pipeline can run against stubs; use
    `Engine.from_settings()` to build the production wiring.
    """

    def __init__(
        self,
        llm_provider: BaseLLMProvider,
        settings=None,
        retriever: Optional[SourceRetriever] = None,
        scraper: Optional[WebScraper] = None,
        knowledge_store: Optional[KnowledgeStore] = None,
        cache: Optional[ResponseCache] = None,
    ):
        if llm_provider is None:
            raise ConfigurationError("A completion provider is required")

        self.settings = settings or get_settings()
        self.llm_provider = llm_provider

        self.query_processor = QueryProcessor(llm_provider)
        self.retriever = retriever or SourceRetriever(self.settings)
        self.scraper = scraper or WebScraper(self.settings)
        self.summarizer = ContentSummarizer(
            llm_provider, self.settings.engine.synthesis_source_chars
        )
        self.cache = cache or ResponseCache(self.settings)

        self.database_processor: Optional[DatabaseQueryProcessor] = None
        if knowledge_store is not None and self.settings.engine.enable_database_check:
            self.database_processor = DatabaseQueryProcessor(knowledge_store, llm_provider)

        self.pipeline_timeout = self.settings.engine.pipeline_timeout_ms / 1000
        self.direct_timeout = self.settings.engine.direct_timeout_ms / 1000

    @classmethod
    def from_settings(cls, settings=None) -> "Engine":
        """Build the engine from configuration. Raises ConfigurationError."""
        settings = settings or get_settings()
        provider = get_provider(settings)

        store = None
        if settings.knowledge.enabled:
            store = QdrantKnowledgeStore(settings)

        return cls(provider, settings=settings, knowledge_store=store)

    # ─────────────────────────────────────────────
    #  Entry point
    # ─────────────────────────────────────────────

    async def answer(self, query: str) -> AnswerEnvelope:
        """
        Answer a user query. Never raises.

        Failures degrade: live pipeline → direct completion → fixed apology.
        """
        start = time.perf_counter()

        try:
            cached = self.cache.get(query)
            if cached is not None:
                logger.debug(f"Cache hit for '{cached.query}'")
                provenance = cached.envelope.provenance.model_copy(update={"from_cache": True})
                return cached.envelope.model_copy(update={"provenance": provenance})

            if self.should_use_live_pipeline(query):
                envelope = await self._answer_live(query, start)
            else:
                logger.info("Using direct completion path")
                envelope = await self._answer_direct(query, start, fallback_used=False)

            if envelope.answer_text not in FAILURE_MESSAGES:
                self.cache.set(query, envelope)
            return envelope

        except Exception:
            logger.error("Answer engine failed", exc_info=True)
            return self._envelope(query, APOLOGY_MESSAGE, 0.0, StageTimings(total=_elapsed_ms(start)))

    def should_use_live_pipeline(self, query: str) -> bool:
        """Route queries that benefit from live sources to the pipeline."""
        if not self.settings.engine.enable_routing:
            return True

        text = query.lower().strip()
        if len(text) < 15:
            return False
        if any(p.search(text) for p in SIMPLE_PATTERNS):
            return False
        if len(text) < 50 and any(p.search(text) for p in CONVERSATIONAL_PATTERNS):
            return False

        return any(p.search(text) for p in LIVE_DATA_PATTERNS)

    async def _answer_live(self, query: str, start: float) -> AnswerEnvelope:
        try:
            return await asyncio.wait_for(self.run_pipeline(query), timeout=self.pipeline_timeout)
        except asyncio.TimeoutError:
            logger.warning(
                f"Pipeline timed out after {self.pipeline_timeout:g}s, falling back to direct path"
            )
        except Exception as e:
            logger.warning(f"Pipeline failed, falling back to direct path: {e}")

        return await self._answer_direct(query, start, fallback_used=True)

    async def _answer_direct(self, query: str, start: float, fallback_used: bool) -> AnswerEnvelope:
        answer = await self.direct_answer(query)
        return self._envelope(
            query,
            answer,
            0.0 if answer in FAILURE_MESSAGES else DIRECT_FALLBACK_CONFIDENCE,
            StageTimings(total=_elapsed_ms(start)),
            Provenance(fallback_used=fallback_used),
        )

    # ─────────────────────────────────────────────
    #  Direct path
    # ─────────────────────────────────────────────

    async def direct_answer(self, query: str) -> str:
        """One completion call with its own timeout. Never raises."""
        try:
            return await asyncio.wait_for(
                self.llm_provider.generate(DIRECT_PROMPT.format(query=query)),
                timeout=self.direct_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning("Direct completion timed out")
        except LLMError as e:
            logger.warning(f"Direct completion failed ({e.kind}): {e}")
            if e.kind == "authorization":
                return AUTHORIZATION_MESSAGE
            if e.kind == "quota":
                return QUOTA_MESSAGE
        except Exception as e:
            logger.error(f"Direct completion failed: {e}")

        return APOLOGY_MESSAGE

    # ─────────────────────────────────────────────
    #  Live pipeline
    # ─────────────────────────────────────────────

    async def run_pipeline(self, query: str) -> AnswerEnvelope:
        """
        Run every stage once. Raises on synthesis failure; the caller
        handles fallback.
        """
        total_start = time.perf_counter()
        timings: Dict[str, int] = {}

        # Stage 0: knowledge store
        if self.database_processor is not None:
            logger.info("Stage 0: checking knowledge store...")
            stage_start = time.perf_counter()
            db_result = await self.database_processor.try_answer_from_store(query)
            timings["database_check"] = _elapsed_ms(stage_start)

            if db_result.found and db_result.answer_text:
                logger.info("Knowledge store answer found, skipping live retrieval")
                return self._envelope(
                    query,
                    db_result.answer_text,
                    db_result.confidence,
                    self._timings(timings, total_start),
                    Provenance(database_used=True, database_source=db_result.source),
                )

        # Stage 1: classification
        logger.info("Stage 1: classifying query...")
        stage_start = time.perf_counter()
        processed = await self.query_processor.classify(query)
        timings["query_processing"] = _elapsed_ms(stage_start)
        logger.info(
            f"Query classified: type={processed.type.value} "
            f"sources={[k.value for k in processed.target_source_kinds]} "
            f"confidence={processed.confidence}"
        )

        # Stage 2: retrieval
        logger.info("Stage 2: retrieving from targeted sources...")
        stage_start = time.perf_counter()
        candidates = await self.retriever.retrieve(
            processed.search_terms,
            processed.target_source_kinds,
            processed.refined_text,
        )
        timings["source_retrieval"] = _elapsed_ms(stage_start)
        logger.info(f"Retrieved {len(candidates)} candidates")

        # Stage 3: scraping
        logger.info("Stage 3: scraping content...")
        stage_start = time.perf_counter()
        extracted = await self.scrape_content(candidates)
        timings["content_scraping"] = _elapsed_ms(stage_start)
        logger.info(f"Scraped {len(extracted)}/{len(candidates)} sources")

        # Stage 4: synthesis
        logger.info("Stage 4: synthesizing response...")
        stage_start = time.perf_counter()
        synthesis = await self.summarizer.synthesize(processed, candidates, extracted)
        timings["synthesis"] = _elapsed_ms(stage_start)

        stage_timings = self._timings(timings, total_start)
        logger.info(f"Pipeline completed in {stage_timings.total}ms: {stage_timings.model_dump()}")

        return AnswerEnvelope(
            answer_text=synthesis.answer_text,
            sources=candidates,
            confidence=synthesis.confidence,
            stage_timings=stage_timings,
            provenance=Provenance(live_pipeline=True),
            original_query=processed.original_text,
            refined_query=processed.refined_text,
            query_type=processed.type,
            target_sources=processed.target_source_kinds,
            sources_retrieved=len(candidates),
            sources_scraped=len(extracted),
        )

    async def scrape_content(self, candidates: List[Candidate]) -> Dict[str, ExtractedArticle]:
        """Scrape the top candidates, keeping only usable articles."""
        urls = [c.url for c in candidates[:self.settings.engine.max_sources_to_scrape]]
        if not urls:
            return {}

        outcomes = await self.scraper.fetch_many(urls)
        min_chars = self.settings.scraper.min_content_chars

        return {
            url: outcome
            for url, outcome in outcomes.items()
            if isinstance(outcome, ExtractedArticle) and len(outcome.body_text) > min_chars
        }

    @staticmethod
    def _timings(timings: Dict[str, int], total_start: float) -> StageTimings:
        stage_timings = StageTimings(**timings)
        total = max(_elapsed_ms(total_start), stage_timings.stage_sum())
        return stage_timings.model_copy(update={"total": total})

    @staticmethod
    def _envelope(
        query: str,
        answer: str,
        confidence: float,
        timings: StageTimings,
        provenance: Optional[Provenance] = None,
    ) -> AnswerEnvelope:
        return AnswerEnvelope(
            answer_text=answer,
            sources=[],
            confidence=max(0.0, min(1.0, confidence)),
            stage_timings=timings,
            provenance=provenance or Provenance(),
            original_query=query,
        )

    # ─────────────────────────────────────────────
    #  Status
    # ─────────────────────────────────────────────

    def configuration_status(self) -> Dict[str, bool]:
        """Which collaborators are configured."""
        search = self.settings.search
        has_completion = self.llm_provider.is_available()
        has_search = bool(search.serper_api_key)
        has_news = bool(search.news_api_key)
        return {
            "has_completion": has_completion,
            "has_web_search": has_search,
            "has_news_api": has_news,
            "has_knowledge_store": self.database_processor is not None,
            "is_fully_configured": has_completion and (has_search or has_news),
        }

    def available_sources(self) -> List[SourceKind]:
        return self.retriever.configured_kinds()
