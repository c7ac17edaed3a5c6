"""
MCP Tools - Shared Dependencies

One process-wide Engine, built lazily from settings on first use.
"""

from typing import Optional

from honig.config import get_settings
from honig.services import Engine


_engine: Optional[Engine] = None


def get_engine() -> Engine:
    """Get the shared engine. Raises ConfigurationError if unconfigured."""
    global _engine
    if _engine is None:
        _engine = Engine.from_settings(get_settings())
    return _engine


def set_engine(engine: Optional[Engine]) -> None:
    """Replace the shared engine (tests, embedding hosts)."""
    global _engine
    _engine = engine
