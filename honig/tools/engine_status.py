"""
MCP Tool - engine_status

Configuration and cache status.
"""

import asyncio

from fastmcp import FastMCP

from honig.tools.deps import get_engine

router = FastMCP("engine_status")


@router.tool()
async def engine_status() -> dict:
    """
    Report which collaborators are configured.

    Returns:
        Configuration flags, searchable source kinds and cache statistics
    """
    engine = get_engine()
    # Provider availability checks may block on a network probe
    configuration = await asyncio.to_thread(engine.configuration_status)
    return {
        "configuration": configuration,
        "available_sources": [k.value for k in engine.available_sources()],
        "cache": engine.cache.stats(),
    }
