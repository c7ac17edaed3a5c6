"""
MCP Tool - classify_query

Query type and target source classification.
"""

from fastmcp import FastMCP

from honig.tools.deps import get_engine

router = FastMCP("classify_query")


@router.tool()
async def classify_query(query: str) -> dict:
    """
    Classify a query without retrieving anything.

    Args:
        query: Natural language query

    Returns:
        Refined query, type, target sources, search terms and confidence
    """
    processed = await get_engine().query_processor.classify(query)
    return processed.model_dump(mode="json")
