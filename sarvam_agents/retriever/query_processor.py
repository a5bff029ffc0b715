"""
Query Processor

Normalizes a documentation search term and decomposes it into core terms
(multi-word Sarvam concepts from the vocabulary, treated as atomic keywords)
and secondary terms (the remaining loose tokens).

Pure: no filesystem access, so it can be exercised on its own.
"""

from typing import Dict, List, Mapping, Optional, Sequence, Tuple
from dataclasses import dataclass, field

from .vocabulary import DEFAULT_CORE_TERMS

MARKDOWN_EXTENSION = ".md"

# Trailing/leading punctuation stripped from loose tokens ("api?" -> "api")
_TOKEN_PUNCTUATION = "\"'`,;:!?()[]{}"


@dataclass
class ParsedQuery:
    """Parsed representation of a documentation search term"""
    original: str
    normalized: str
    core_terms: List[str] = field(default_factory=list)
    secondary_terms: List[str] = field(default_factory=list)
    # core term -> surface forms that count as an occurrence of it
    term_forms: Dict[str, Tuple[str, ...]] = field(default_factory=dict)

    @property
    def core_count(self) -> int:
        return len(self.core_terms)

    @property
    def has_terms(self) -> bool:
        return bool(self.core_terms or self.secondary_terms)

    @property
    def is_filename(self) -> bool:
        """True when the query itself names a markdown file"""
        return self.normalized.endswith(MARKDOWN_EXTENSION)

    def core_term_in(self, term: str, text: str) -> bool:
        """Check whether any surface form of a core term occurs in text"""
        return any(form in text for form in self.term_forms.get(term, (term,)))


def surface_forms(term: str, aliases: Sequence[str] = ()) -> Tuple[str, ...]:
    """All lower-cased spellings of a core term, canonical first, deduplicated."""
    forms: List[str] = []
    for candidate in [term, *aliases]:
        candidate = candidate.strip().lower()
        if not candidate:
            continue
        for spelling in (candidate, candidate.replace(" ", "-")):
            if spelling not in forms:
                forms.append(spelling)
    return tuple(forms)


class QueryProcessor:
    """
    Decomposes documentation queries into core and secondary terms.

    Responsibilities:
    1. Normalize the raw query (trim, lower-case)
    2. Recognise vocabulary core terms as substrings, longest spelling first,
       so overlapping occurrences are claimed only once
    3. Tokenize whatever the core terms did not claim into secondary terms
    4. Guarantee a non-empty keyword set for a non-empty query
    """

    def __init__(self, core_terms: Optional[Mapping[str, Sequence[str]]] = None):
        """Initialize query processor.

        Args:
            core_terms: Mapping of canonical core term -> aliases.
                Defaults to the built-in Sarvam vocabulary.
        """
        vocabulary = DEFAULT_CORE_TERMS if core_terms is None else core_terms
        self._vocabulary: List[str] = []
        self._forms: Dict[str, Tuple[str, ...]] = {}
        for term, aliases in vocabulary.items():
            canonical = term.strip().lower()
            if not canonical or canonical in self._forms:
                continue
            self._vocabulary.append(canonical)
            self._forms[canonical] = surface_forms(canonical, aliases or ())

        # Longest spelling first; ties keep vocabulary order
        self._ordered_forms: List[Tuple[str, str]] = sorted(
            ((term, form) for term in self._vocabulary for form in self._forms[term]),
            key=lambda pair: -len(pair[1]),
        )

    @property
    def vocabulary(self) -> List[str]:
        return list(self._vocabulary)

    def parse(self, query: str) -> ParsedQuery:
        """
        Parse a search term into core and secondary keywords.

        Args:
            query: Raw search term

        Returns:
            ParsedQuery with normalized text and both keyword sets
        """
        normalized = (query or "").strip().lower()
        claimed = [False] * len(normalized)
        found = set()

        for term, form in self._ordered_forms:
            start = normalized.find(form)
            while start != -1:
                end = start + len(form)
                if not any(claimed[start:end]):
                    for i in range(start, end):
                        claimed[i] = True
                    found.add(term)
                start = normalized.find(form, start + 1)

        core_terms = [term for term in self._vocabulary if term in found]
        term_forms = {term: self._forms[term] for term in core_terms}

        remainder = "".join(" " if taken else ch for ch, taken in zip(normalized, claimed))
        if normalized.endswith(MARKDOWN_EXTENSION):
            remainder = remainder[: -len(MARKDOWN_EXTENSION)]

        secondary_terms = self._tokenize(remainder, core_terms)

        if not core_terms and not secondary_terms and normalized:
            secondary_terms = [normalized]

        return ParsedQuery(
            original=query,
            normalized=normalized,
            core_terms=core_terms,
            secondary_terms=secondary_terms,
            term_forms=term_forms,
        )

    def _tokenize(self, text: str, core_terms: List[str]) -> List[str]:
        """Split unclaimed text into unique tokens longer than one character."""
        excluded = set(core_terms)
        for term in core_terms:
            excluded.update(self._forms[term])

        tokens: List[str] = []
        for raw in text.split():
            token = raw.strip(_TOKEN_PUNCTUATION)
            if len(token) <= 1 or token in excluded or token in tokens:
                continue
            tokens.append(token)
        return tokens
