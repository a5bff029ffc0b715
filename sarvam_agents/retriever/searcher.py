"""
Documentation Searcher

Picks the single most relevant markdown file for a search term and loads it.

Pipeline:
1. Enumerate candidate files under the documentation root
2. Parse the search term into core and secondary terms
3. Score filenames/paths; escalate to content/headings when inconclusive
4. Fall back to a lone candidate; otherwise report no match
5. Read the winner and package the result

Every call re-enumerates and re-scores; nothing is cached between calls.
"""

import logging
import os
from pathlib import Path
from typing import Any, List, Mapping, Optional, Sequence

from ..common.config import DEFAULT_DOC_AREAS, DocsConfig
from ..common.schemas import MatchStrategy, RetrievalResult
from .corpus import Corpus, CorpusError, enumerate_candidates
from .query_processor import ParsedQuery, QueryProcessor
from .scoring import (
    ESCALATION_THRESHOLD,
    ScoredCandidate,
    exact_filename_match,
    score_by_content,
    score_by_name,
)

logger = logging.getLogger(__name__)


def select_match(candidates: List[str], query: ParsedQuery, root: Path) -> Optional[ScoredCandidate]:
    """
    Run the scoring strategies in priority order and return one winner.

    Args:
        candidates: Root-relative candidate paths in enumeration order
        query: Parsed query
        root: Documentation root

    Returns:
        The winning ScoredCandidate, or None if nothing matched
    """
    # Strategy 1: exact filename
    best = exact_filename_match(candidates, query)
    if best is not None:
        logger.info(f"Found exact filename match: {best.file}")
        return best

    # Strategy 2: keywords in filename and path
    by_name = score_by_name(candidates, query)
    if by_name:
        best = by_name[0]
        logger.info(f"Top filename keyword match: {best.file} Score: {best.score}")

    # Strategy 3: content and headings, when the filename signal is weak
    if best is None or best.score < ESCALATION_THRESHOLD:
        logger.info("Filename match was weak or non-existent, proceeding to content search.")
        content_best = score_by_content(
            candidates,
            query,
            root,
            prior_best=best,
            filename_scores={c.file: c.score for c in by_name},
        )
        # Content evidence wins ties against a filename-only match
        if content_best is not None and (best is None or content_best.score >= best.score):
            best = content_best
            logger.info(f"Top content match selected: {best.file} Score: {best.score}")

    if best is None and len(candidates) == 1 and query.has_terms:
        best = ScoredCandidate(candidates[0], 1, MatchStrategy.SINGLE_CANDIDATE)
        logger.info(f"Only one candidate file and no strong matches, selecting it as a fallback: {best.file}")

    return best


def load_match(match: ScoredCandidate, root: Path) -> RetrievalResult:
    """Read the winning file and package it as a RetrievalResult."""
    path = root / match.file
    try:
        if not path.is_file():
            raise FileNotFoundError(f"File {match.file} (resolved to {path}) not found.")
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Error reading file {match.file} (at {path}): {e}")
        return RetrievalResult.failure(
            f"Found a potential match {match.file}, but an error occurred while reading its content.",
            f"Error reading file {match.file}: {e}",
        )

    logger.info(f"Successfully read file: {match.file}")
    return RetrievalResult.success(match.file, content)


class DocsRetriever:
    """
    Retrieves the single most relevant Sarvam documentation file.

    All inputs arrive as plain configuration; the retriever reads no
    environment variables and never writes to disk.
    """

    def __init__(
        self,
        docs_root: os.PathLike,
        default_areas: Optional[Sequence[str]] = None,
        core_terms: Optional[Mapping[str, Sequence[str]]] = None,
    ):
        """
        Initialize retriever.

        Args:
            docs_root: Documentation root containing area subdirectories
            default_areas: Areas searched when no doc_area is given
            core_terms: Core-term vocabulary (term -> aliases); built-in if None
        """
        self._root = Path(docs_root)
        self._default_areas = list(DEFAULT_DOC_AREAS if default_areas is None else default_areas)
        self._processor = QueryProcessor(core_terms)

    @classmethod
    def from_config(cls, config: DocsConfig) -> "DocsRetriever":
        return cls(config.root, config.default_areas, config.core_terms)

    @property
    def docs_root(self) -> Path:
        return self._root

    def retrieve(
        self,
        search_term: str,
        doc_area: Optional[str] = None,
        context: Optional[Any] = None,
    ) -> RetrievalResult:
        """
        Find and load the best-matching documentation file.

        Args:
            search_term: Keywords, a topic, or a partial/full filename
            doc_area: Optional area to restrict the search to
            context: Host execution context; used only for diagnostics

        Returns:
            RetrievalResult (never raises for I/O or validation problems)
        """
        logger.info(f'Executing Sarvam Docs File Retrieval with search_term: "{search_term}", doc_area: "{doc_area}"')
        if context is None:
            logger.debug("Tool execution context was not provided.")

        try:
            corpus = enumerate_candidates(self._root, doc_area, self._default_areas)
        except CorpusError as e:
            logger.error(e.status_message)
            return RetrievalResult.failure(e.status_message, e.error_message)

        if corpus.is_empty:
            return RetrievalResult.failure(
                f"No .md files found in the searched documentation areas: {', '.join(corpus.searched_areas)}."
            )

        query = self._processor.parse(search_term)
        logger.debug(f"Core terms: {query.core_terms} Secondary terms: {query.secondary_terms}")

        match = select_match(corpus.candidates, query, corpus.root)
        if match is None:
            return self._no_match(search_term, corpus)
        return load_match(match, corpus.root)

    @staticmethod
    def _no_match(search_term: str, corpus: Corpus) -> RetrievalResult:
        return RetrievalResult.failure(
            f'No relevant file found for "{search_term}" in areas: {", ".join(corpus.searched_areas)}. '
            "Please try different keywords or check filenames."
        )
