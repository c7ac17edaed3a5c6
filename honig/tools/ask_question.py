"""
MCP Tool - ask_question

Retrieval-augmented answers from live web sources.
"""

from fastmcp import FastMCP

from honig.tools.deps import get_engine

router = FastMCP("ask_question")


@router.tool()
async def ask_question(question: str) -> dict:
    """
    Answer a question using live sources.

    Classifies the question, retrieves candidates from encyclopedia,
    news, community and academic sources, scrapes the best pages and
    synthesizes one answer with [Source N] citations. Simple
    conversational questions are answered directly.

    Args:
        question: Natural language question

    Returns:
        Answer with sources, confidence, stage timings and provenance
    """
    envelope = await get_engine().answer(question)
    return envelope.model_dump(mode="json")
