"""
MCP Tool - extract_page

Fetch one page and extract readable article content.
"""

from dataclasses import asdict

from fastmcp import FastMCP

from honig.pipeline.scraper import ScrapeError
from honig.tools.deps import get_engine

router = FastMCP("extract_page")

AD_HOC_MAX_CONTENT_LENGTH = 50000


@router.tool()
async def extract_page(url: str) -> dict:
    """
    Get the article content of a web page.

    Args:
        url: Page URL (http or https)

    Returns:
        Title, body text, metadata and readability score, or an error
        with its failure kind
    """
    scraper = get_engine().scraper

    try:
        article = await scraper.fetch_and_extract(url, AD_HOC_MAX_CONTENT_LENGTH)
    except ScrapeError as e:
        return {"error": asdict(e.to_failure())}

    return article.model_dump(mode="json")
