"""
Sarvam Agents Common Module

Shared infrastructure for the documentation retriever and the MCP server.
"""

from .config import SarvamConfig, SarvamAPIConfig, DocsConfig, load_config
from .language import map_language_code

__all__ = [
    "SarvamConfig",
    "SarvamAPIConfig",
    "DocsConfig",
    "load_config",
    "map_language_code",
]
