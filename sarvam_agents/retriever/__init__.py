"""
Documentation Retriever - Local Sarvam docs lookup

Picks exactly one markdown file from the local documentation tree for a
free-text query, without any search index or embedding model.

Key Components:
- enumerate_candidates: Lists markdown files under the requested areas
- QueryProcessor: Splits a query into core and secondary terms
- score_by_name / score_by_content: Filename and content/heading scoring
- DocsRetriever: Runs the pipeline and loads the winning file
"""

from .corpus import Corpus, CorpusError, enumerate_candidates
from .query_processor import ParsedQuery, QueryProcessor
from .scoring import ESCALATION_THRESHOLD, ScoredCandidate, score_by_content, score_by_name
from .searcher import DocsRetriever, load_match, select_match
from .vocabulary import DEFAULT_CORE_TERMS

__all__ = [
    "Corpus",
    "CorpusError",
    "enumerate_candidates",
    "ParsedQuery",
    "QueryProcessor",
    "ESCALATION_THRESHOLD",
    "ScoredCandidate",
    "score_by_content",
    "score_by_name",
    "DocsRetriever",
    "load_match",
    "select_match",
    "DEFAULT_CORE_TERMS",
]
