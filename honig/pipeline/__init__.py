"""
Pipeline Module - Answer Pipeline Stages

Classify → Retrieve → Scrape → Extract → Synthesize
"""

from honig.pipeline.extractor import ContentExtractor, readability_score
from honig.pipeline.scraper import ScrapeError, ScrapeFailure, WebScraper
from honig.pipeline.query_processor import QueryProcessor
from honig.pipeline.retriever import SourceRetriever, merge_candidates
from honig.pipeline.summarizer import ContentSummarizer, SynthesisError

__all__ = [
    "ContentExtractor",
    "readability_score",
    "WebScraper",
    "ScrapeError",
    "ScrapeFailure",
    "QueryProcessor",
    "SourceRetriever",
    "merge_candidates",
    "ContentSummarizer",
    "SynthesisError",
]
