"""
Sarvam MCP Schemas
"""

from .retrieval import MatchStrategy, RetrievalResult

__all__ = [
    "MatchStrategy",
    "RetrievalResult",
]
