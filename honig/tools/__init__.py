"""
Tools Module - MCP Tool Implementations

MCP tools exposing the answer pipeline.
"""

from honig.tools import ask_question
from honig.tools import classify_query
from honig.tools import search_sources
from honig.tools import extract_page
from honig.tools import engine_status

__all__ = [
    "ask_question",
    "classify_query",
    "search_sources",
    "extract_page",
    "engine_status",
]
