"""
Sarvam Agents

Host-independent logic behind the Sarvam MCP server.

Philosophy:
- Documentation lookup works offline against the local docs tree
- Exactly one file (or a structured failure) per lookup
- Configuration is passed in explicitly, never read from ambient state

Usage:
    from sarvam_agents.common import load_config
    from sarvam_agents.retriever import DocsRetriever
"""

__version__ = "0.1.0"
