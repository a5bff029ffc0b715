"""
Relevance scoring for the documentation retriever.

Two strategies, applied in priority order by the searcher:
- Filename/path scoring: exact filename short-circuit, then weighted
  keyword and phrase heuristics over the bare filename and relative path
- Content/heading scoring: keyword and phrase presence in the file body
  and its markdown headings, folded into any existing filename score

The weights are empirical.
"""

import math
import logging
import posixpath
from pathlib import Path
from typing import Dict, Iterable, List, Optional
from dataclasses import dataclass

from ..common.schemas import MatchStrategy
from .query_processor import MARKDOWN_EXTENSION, ParsedQuery

logger = logging.getLogger(__name__)

# Filename/path weights
CORE_IN_FILENAME = 30
CORE_IN_PATH = 15
SECONDARY_IN_FILENAME = 10
SECONDARY_IN_PATH = 5
HYPHENATED_QUERY_IN_STEM = 25
RAW_QUERY_IN_FILENAME = 20
ALL_CORE_IN_FILENAME = 20
PARTIAL_CORE_IN_FILENAME = 10

# Content/heading weights
CORE_IN_CONTENT = 10
CORE_IN_HEADING = 25
SECONDARY_IN_CONTENT = 2
SECONDARY_IN_HEADING = 5
QUERY_IN_CONTENT = 15
QUERY_IN_HEADING = 30
ALL_CORE_IN_CONTENT = 20
PARTIAL_CORE_IN_CONTENT = 5

# Below this a filename match is inconclusive and content is scanned
ESCALATION_THRESHOLD = 40
# Share of the content score added on top of a credible filename score
CONTENT_BOOST_FACTOR = 0.5


@dataclass
class ScoredCandidate:
    """A candidate file with its relevance score"""
    file: str
    score: float
    strategy: MatchStrategy

    @property
    def is_exact(self) -> bool:
        return math.isinf(self.score)


# ---------------------------------------------------------------------------
# Filename / path
# ---------------------------------------------------------------------------

def exact_filename_match(candidates: Iterable[str], query: ParsedQuery) -> Optional[ScoredCandidate]:
    """
    Find a candidate named exactly by a query ending in ".md".

    Path matches (equal, or ending in "/<query>") are preferred over a bare
    filename match.
    """
    if not query.is_filename:
        return None

    candidates = list(candidates)
    term = query.normalized
    for file in candidates:
        lowered = file.lower()
        if lowered == term or lowered.endswith(f"/{term}"):
            return ScoredCandidate(file, math.inf, MatchStrategy.EXACT_FILENAME)

    bare_name = posixpath.basename(term)
    for file in candidates:
        if posixpath.basename(file).lower() == bare_name:
            return ScoredCandidate(file, math.inf, MatchStrategy.EXACT_FILENAME)
    return None


def filename_score(file: str, query: ParsedQuery) -> float:
    """Weighted keyword/phrase score of one candidate's filename and path."""
    path = file.lower()
    filename = posixpath.basename(path)
    stem = filename[: -len(MARKDOWN_EXTENSION)] if filename.endswith(MARKDOWN_EXTENSION) else filename
    multiplier = query.core_count + 1
    score = 0

    core_in_filename = 0
    for term in query.core_terms:
        if query.core_term_in(term, filename):
            score += CORE_IN_FILENAME
            core_in_filename += 1
        elif query.core_term_in(term, path):
            score += CORE_IN_PATH

    for term in query.secondary_terms:
        if term in filename:
            score += SECONDARY_IN_FILENAME
        elif term in path:
            score += SECONDARY_IN_PATH

    if query.normalized:
        if query.normalized.replace(" ", "-") in stem:
            score += HYPHENATED_QUERY_IN_STEM * multiplier
        elif query.normalized in filename:
            score += RAW_QUERY_IN_FILENAME * multiplier

    if query.core_count > 1:
        if core_in_filename == query.core_count:
            score += ALL_CORE_IN_FILENAME
        elif core_in_filename > 1:
            score += PARTIAL_CORE_IN_FILENAME * core_in_filename

    return score


def score_by_name(candidates: Iterable[str], query: ParsedQuery) -> List[ScoredCandidate]:
    """
    Score candidates on filename and path, best first.

    Zero scores are dropped. The sort is stable, so equal scores keep
    enumeration order.
    """
    scored = []
    for file in candidates:
        score = filename_score(file, query)
        if score > 0:
            scored.append(ScoredCandidate(file, score, MatchStrategy.FILENAME_PATH))
    scored.sort(key=lambda c: c.score, reverse=True)
    return scored


# ---------------------------------------------------------------------------
# Content / headings
# ---------------------------------------------------------------------------

def extract_headings(content: str) -> List[str]:
    """Markdown heading lines with the leading '#' markers removed.

    Lines inside fenced code blocks (``` or ~~~) are not headings.
    """
    headings = []
    fence = None
    for line in content.splitlines():
        stripped = line.lstrip()
        marker = stripped[:3]
        if marker in ("```", "~~~"):
            if fence is None:
                fence = marker
            elif fence == marker:
                fence = None
            continue
        if fence is None and stripped.startswith("#"):
            headings.append(stripped.lstrip("#").strip())
    return headings


def content_score(content: str, query: ParsedQuery) -> float:
    """
    Keyword/phrase score of a file body and its headings.

    Heading matches are cumulative per heading, so every additional heading
    that mentions a term adds weight.

    Args:
        content: Lower-cased file text
        query: Parsed query
    """
    headings = extract_headings(content)
    multiplier = query.core_count + 1
    score = 0

    core_in_content = 0
    for term in query.core_terms:
        if query.core_term_in(term, content):
            score += CORE_IN_CONTENT
            core_in_content += 1
        score += CORE_IN_HEADING * sum(1 for h in headings if query.core_term_in(term, h))

    for term in query.secondary_terms:
        if term in content:
            score += SECONDARY_IN_CONTENT
        score += SECONDARY_IN_HEADING * sum(1 for h in headings if term in h)

    if query.normalized:
        if query.normalized in content:
            score += QUERY_IN_CONTENT * multiplier
        if any(query.normalized in h for h in headings):
            score += QUERY_IN_HEADING * multiplier

    if query.core_count > 1:
        if core_in_content == query.core_count:
            score += ALL_CORE_IN_CONTENT
        else:
            score += PARTIAL_CORE_IN_CONTENT * core_in_content

    return score


def combine_scores(prior_score: float, content: float) -> float:
    """Fold a content score into a filename score.

    A weak filename score is dominated by content; a credible one is only
    boosted by it.
    """
    if prior_score < ESCALATION_THRESHOLD:
        return prior_score + content
    return prior_score + CONTENT_BOOST_FACTOR * content


def score_by_content(
    candidates: List[str],
    query: ParsedQuery,
    root: Path,
    prior_best: Optional[ScoredCandidate] = None,
    filename_scores: Optional[Dict[str, float]] = None,
) -> Optional[ScoredCandidate]:
    """
    Score candidates on content and headings and return the best one.

    The prior best filename match is scanned first, then the remaining
    candidates in enumeration order; ties go to the earlier scan.
    Unreadable files are logged and skipped.

    Args:
        candidates: Root-relative candidate paths
        query: Parsed query
        root: Documentation root the candidates are relative to
        prior_best: Best filename match, if any
        filename_scores: Existing filename score per candidate

    Returns:
        Best content-inclusive match, or None when every score is zero
    """
    filename_scores = filename_scores or {}
    if prior_best is not None:
        scan_order = [prior_best.file] + [f for f in candidates if f != prior_best.file]
    else:
        scan_order = list(candidates)

    best: Optional[ScoredCandidate] = None
    for file in scan_order:
        try:
            text = (root / file).read_text(encoding="utf-8").lower()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read or score content for {file}: {e}")
            continue

        prior_score = filename_scores.get(file, 0)
        if prior_best is not None and file == prior_best.file:
            prior_score = prior_best.score
        final = combine_scores(prior_score, content_score(text, query))
        if final <= 0:
            continue
        if best is None or final > best.score:
            best = ScoredCandidate(file, final, MatchStrategy.CONTENT_HEADING)

    if best is not None:
        logger.debug(f"Top content match: {best.file} (score {best.score})")
    return best
