"""
MCP Tool - search_sources

Multi-source retrieval without scraping or synthesis.
"""

from typing import List, Optional

from fastmcp import FastMCP

from honig.schemas import SourceKind
from honig.tools.deps import get_engine

router = FastMCP("search_sources")


@router.tool()
async def search_sources(query: str, sources: Optional[List[str]] = None) -> dict:
    """
    Search the configured sources for a query.

    Args:
        query: Natural language query
        sources: Source kinds to search (default: chosen by classification).
            One of: encyclopedia, community-qa-1, community-qa-2, news,
            academic, forums

    Returns:
        Source kinds searched and ranked candidates
    """
    engine = get_engine()
    processed = await engine.query_processor.classify(query)

    kinds = processed.target_source_kinds
    if sources:
        kinds = []
        for name in sources:
            try:
                kinds.append(SourceKind.parse(name))
            except ValueError:
                return {"error": f"Unknown source kind: {name}"}

    candidates = await engine.retriever.retrieve(
        processed.search_terms, kinds, processed.refined_text
    )

    return {
        "query": processed.refined_text,
        "sources": [k.value for k in kinds],
        "total": len(candidates),
        "results": [c.model_dump(mode="json") for c in candidates],
    }
