"""
Honig MCP Server - Main Entry Point

FastMCP server with STDIO and SSE transport support.
"""

import argparse
import logging

from fastmcp import FastMCP

from honig.config import configure_logging, get_settings
from honig.tools import (
    ask_question,
    classify_query,
    search_sources,
    extract_page,
    engine_status,
)


logger = logging.getLogger(__name__)

TOOL_ROUTERS = [
    ask_question.router,
    classify_query.router,
    search_sources.router,
    extract_page.router,
    engine_status.router,
]


def create_app() -> FastMCP:
    """Create the MCP application with every tool router mounted."""
    mcp = FastMCP(
        name="honig",
        instructions="Answers questions from live web, news, community and academic sources",
    )

    for router in TOOL_ROUTERS:
        mcp.mount(router)

    return mcp


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Honig MCP Server")
    parser.add_argument(
        "--transport",
        choices=["stdio", "sse"],
        default=None,
        help="Transport protocol (default: MCP_TRANSPORT)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port for SSE transport (default: MCP_PORT)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Log level (default: LOG_LEVEL)",
    )
    args = parser.parse_args()

    settings = get_settings()
    if args.log_level:
        settings.log.level = args.log_level
    configure_logging(settings)

    transport = args.transport or settings.mcp.transport
    port = args.port or settings.mcp.port

    mcp = create_app()
    logger.info(f"Starting Honig MCP server over {transport}")

    if transport == "stdio":
        mcp.run(transport="stdio")
    else:
        mcp.run(transport="sse", host=settings.mcp.host, port=port)


if __name__ == "__main__":
    main()
