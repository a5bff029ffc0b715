"""
Corpus Enumerator

Lists the markdown files a retrieval may choose from. Paths are returned
relative to the documentation root with forward slashes, so they are
area-qualified ("api-ref/translate.md") and portable.
"""

import os
import logging
from pathlib import Path
from typing import List, Optional, Sequence
from dataclasses import dataclass, field

from .query_processor import MARKDOWN_EXTENSION

logger = logging.getLogger(__name__)


class CorpusError(Exception):
    """Fatal enumeration problem for an explicitly requested doc_area."""

    def __init__(self, status_message: str, error_message: str):
        super().__init__(error_message)
        self.status_message = status_message
        self.error_message = error_message


@dataclass
class Corpus:
    """Enumerated candidates for one retrieval"""
    root: Path
    searched_areas: List[str] = field(default_factory=list)
    candidates: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.candidates


def _within(root: Path, path: Path) -> bool:
    return path == root or root in path.parents


def resolve_area(root: Path, doc_area: str) -> Path:
    """
    Resolve an explicit doc_area to an absolute directory inside root.

    Accepts a bare area ("api-ref"), an already-rooted one ("docs/api-ref"
    when the root directory is named "docs"), or an absolute path that lies
    inside the root.

    Raises:
        CorpusError: if the path cannot be resolved or escapes the documentation root
    """
    area = doc_area.strip().replace("\\", "/")
    if os.path.isabs(area):
        candidate = Path(area)
    else:
        rooted_prefix = f"{root.name}/"
        if area.startswith(rooted_prefix):
            area = area[len(rooted_prefix):]
        candidate = root / area

    try:
        resolved = candidate.resolve()
    except (OSError, ValueError) as e:
        raise CorpusError(f"Invalid doc_area: {doc_area}", f"Invalid doc_area '{doc_area}': {e}") from e
    if not _within(root, resolved):
        message = f"Invalid doc_area '{doc_area}': resolves outside the documentation root"
        raise CorpusError(f"Invalid doc_area: {doc_area}", message)
    return resolved


def _area_label(root: Path, directory: Path) -> str:
    relative = directory.relative_to(root).as_posix()
    return relative if relative != "." else root.name


def _list_markdown(root: Path, directory: Path) -> List[str]:
    """Markdown files directly under directory, as root-relative posix paths."""
    files = []
    for name in sorted(os.listdir(directory)):
        if not name.endswith(MARKDOWN_EXTENSION):
            continue
        path = directory / name
        if path.is_file():
            files.append(path.relative_to(root).as_posix())
    return files


def enumerate_candidates(
    docs_root: os.PathLike,
    doc_area: Optional[str],
    default_areas: Sequence[str],
) -> Corpus:
    """
    Enumerate candidate markdown files.

    Args:
        docs_root: Documentation root directory
        doc_area: Explicit area requested by the caller, or None
        default_areas: Areas searched when no explicit area is given

    Returns:
        Corpus with deduplicated candidates in enumeration order

    Raises:
        CorpusError: invalid doc_area, or the explicit area could not be listed
    """
    root = Path(docs_root).resolve()
    explicit = bool(doc_area and doc_area.strip())

    if explicit:
        search_dirs = [resolve_area(root, doc_area)]
    else:
        search_dirs = []
        for area in default_areas:
            directory = (root / area).resolve()
            if not _within(root, directory):
                logger.warning(f"Default doc area {area} resolves outside {root}. Skipping.")
                continue
            search_dirs.append(directory)

    corpus = Corpus(root=root)
    seen = set()

    for directory in search_dirs:
        label = _area_label(root, directory)
        corpus.searched_areas.append(label)
        logger.debug(f"Searching documentation area {label} ({directory})")

        if not directory.is_dir():
            if explicit:
                cause = f"{directory} does not exist or is not a directory"
                raise CorpusError(
                    f"Failed to list directory for specified doc_area: {label}. Error: {cause}",
                    cause,
                )
            logger.warning(f"Search path {directory} does not exist or is not a directory. Skipping.")
            continue

        try:
            files = _list_markdown(root, directory)
        except OSError as e:
            if explicit:
                raise CorpusError(
                    f"Failed to list directory for specified doc_area: {label}. Error: {e}",
                    str(e),
                ) from e
            logger.warning(f"Could not list directory {label}, continuing: {e}")
            continue

        for file in files:
            if file not in seen:
                seen.add(file)
                corpus.candidates.append(file)

    logger.debug(f"Candidate .md files: {corpus.candidates}")
    return corpus
