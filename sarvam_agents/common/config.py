"""
Configuration Management for the Sarvam MCP server

Loads configuration from ~/.sarvam-mcp/config.json and environment variables.
"""

import os
import json
import logging
from pathlib import Path
from dataclasses import dataclass, field
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)

# Default config paths
CONFIG_DIR = Path.home() / ".sarvam-mcp"
CONFIG_PATH = CONFIG_DIR / "config.json"

DEFAULT_BASE_URL = "https://api.sarvam.ai"
DEFAULT_DOC_AREAS = ["api-ref", "cookbook", "docs-section"]


@dataclass
class SarvamAPIConfig:
    """Sarvam REST API configuration"""
    api_key: str = ""
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 60.0


@dataclass
class DocsConfig:
    """Local documentation retriever configuration"""
    root: str = field(default_factory=lambda: str(Path.cwd() / "docs"))
    default_areas: List[str] = field(default_factory=lambda: list(DEFAULT_DOC_AREAS))
    # None -> built-in vocabulary (see sarvam_agents.retriever.vocabulary)
    core_terms: Optional[Dict[str, List[str]]] = None


@dataclass
class SarvamConfig:
    """Main configuration"""
    api: SarvamAPIConfig = field(default_factory=SarvamAPIConfig)
    docs: DocsConfig = field(default_factory=DocsConfig)
    responses_dir: str = field(default_factory=lambda: str(Path.cwd() / "responses"))


def _parse_api_config(data: dict) -> SarvamAPIConfig:
    """Parse sarvam section from config dict"""
    api_data = data.get("sarvam", {})
    return SarvamAPIConfig(
        api_key=api_data.get("api_key", ""),
        base_url=api_data.get("base_url", DEFAULT_BASE_URL),
        timeout=float(api_data.get("timeout", 60.0)),
    )


def _parse_docs_config(data: dict) -> DocsConfig:
    """Parse docs section from config dict"""
    docs_data = data.get("docs", {})
    defaults = DocsConfig()
    return DocsConfig(
        root=docs_data.get("root", defaults.root),
        default_areas=list(docs_data.get("default_areas", defaults.default_areas)),
        core_terms=docs_data.get("core_terms"),
    )


def load_config(config_path: Optional[Path] = None) -> SarvamConfig:
    """
    Load configuration from file and environment variables.

    Priority (highest to lowest):
    1. Environment variables
    2. Config file (~/.sarvam-mcp/config.json)
    3. Default values
    """
    config = SarvamConfig()
    path = config_path or CONFIG_PATH

    # Load from config file if exists
    if path.exists():
        try:
            with open(path) as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise TypeError(f"expected a JSON object, got {type(data).__name__}")

            config.api = _parse_api_config(data)
            config.docs = _parse_docs_config(data)
            config.responses_dir = data.get("responses_dir", config.responses_dir)
        except (json.JSONDecodeError, IOError, TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Failed to load config file {path}: {e}")

    # Environment variable overrides
    if os.getenv("SARVAM_API_KEY"):
        config.api.api_key = os.getenv("SARVAM_API_KEY")
    if os.getenv("SARVAM_BASE_URL"):
        config.api.base_url = os.getenv("SARVAM_BASE_URL")
    if os.getenv("SARVAM_TIMEOUT"):
        config.api.timeout = float(os.getenv("SARVAM_TIMEOUT"))

    if os.getenv("SARVAM_DOCS_ROOT"):
        config.docs.root = os.getenv("SARVAM_DOCS_ROOT")
    if os.getenv("SARVAM_DOC_AREAS"):
        areas = [a.strip() for a in os.getenv("SARVAM_DOC_AREAS").split(",")]
        config.docs.default_areas = [a for a in areas if a]

    if os.getenv("SARVAM_RESPONSES_DIR"):
        config.responses_dir = os.getenv("SARVAM_RESPONSES_DIR")

    return config
