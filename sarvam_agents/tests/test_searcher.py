"""
Tests for the documentation searcher

Strategy selection, escalation to content, fallbacks, and the result shape
returned for every failure mode.
"""

import pytest

from sarvam_agents.common.schemas import MatchStrategy
from sarvam_agents.retriever import DocsRetriever, QueryProcessor, ScoredCandidate
from sarvam_agents.retriever.searcher import load_match, select_match


def _write(root, relative, text):
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def docs_root(tmp_path):
    root = tmp_path / "docs"
    root.mkdir()
    return root


@pytest.fixture
def parse():
    return QueryProcessor().parse


class TestSelectMatch:

    def test_exact_filename_wins(self, docs_root, parse):
        candidates = ["api-ref/translate.md", "cookbook/translate-guide.md"]

        match = select_match(candidates, parse("translate.md"), docs_root)

        assert match.file == "api-ref/translate.md"
        assert match.strategy == MatchStrategy.EXACT_FILENAME

    def test_strong_filename_match_skips_content(self, docs_root, parse):
        _write(docs_root, "api-ref/rate-limits.md", "# Limits")
        _write(docs_root, "cookbook/guide.md", "# rate limits\n## rate limits\nrate limits everywhere")
        candidates = ["api-ref/rate-limits.md", "cookbook/guide.md"]

        match = select_match(candidates, parse("rate limits"), docs_root)

        assert match.file == "api-ref/rate-limits.md"
        assert match.strategy == MatchStrategy.FILENAME_PATH
        assert match.score == 80

    def test_weak_filename_match_is_boosted_by_content(self, docs_root, parse):
        _write(docs_root, "api-ref/text-to-speech.md", "# Text to Speech\n## Pricing\nText to speech costs per character.")
        _write(docs_root, "cookbook/intro.md", "# Intro")
        candidates = ["api-ref/text-to-speech.md", "cookbook/intro.md"]

        match = select_match(candidates, parse("tts pricing"), docs_root)

        # filename 30, content 42
        assert match.file == "api-ref/text-to-speech.md"
        assert match.strategy == MatchStrategy.CONTENT_HEADING
        assert match.score == 72

    def test_content_overtakes_weak_filename_match(self, docs_root, parse):
        _write(docs_root, "api-ref/text-to-speech.md", "# Overview\nnothing here")
        _write(docs_root, "cookbook/voice-guide.md", "# Text to Speech\n## Text to Speech voices\ntext to speech pricing details")
        candidates = ["api-ref/text-to-speech.md", "cookbook/voice-guide.md"]

        match = select_match(candidates, parse("text to speech pricing"), docs_root)

        assert match.file == "cookbook/voice-guide.md"
        assert match.score == 92

    def test_content_confirms_filename_match_on_tie(self, docs_root, parse):
        _write(docs_root, "api-ref/pricing.md", "nothing")
        _write(docs_root, "cookbook/other.md", "no match")
        candidates = ["api-ref/pricing.md", "cookbook/other.md"]

        match = select_match(candidates, parse("pricing"), docs_root)

        assert match.file == "api-ref/pricing.md"
        assert match.score == 35
        assert match.strategy == MatchStrategy.CONTENT_HEADING

    def test_single_candidate_fallback(self, docs_root, parse):
        _write(docs_root, "cookbook/intro.md", "# Intro")

        match = select_match(["cookbook/intro.md"], parse("zebra"), docs_root)

        assert match.file == "cookbook/intro.md"
        assert match.score == 1
        assert match.strategy == MatchStrategy.SINGLE_CANDIDATE

    def test_no_match(self, docs_root, parse):
        _write(docs_root, "cookbook/intro.md", "# Intro")
        _write(docs_root, "cookbook/setup.md", "# Setup")

        assert select_match(["cookbook/intro.md", "cookbook/setup.md"], parse("zebra"), docs_root) is None

    def test_blank_query_never_falls_back(self, docs_root, parse):
        _write(docs_root, "cookbook/intro.md", "# Intro")

        assert select_match(["cookbook/intro.md"], parse("   "), docs_root) is None


class TestLoadMatch:

    def test_reads_content(self, docs_root):
        _write(docs_root, "cookbook/intro.md", "# Intro\nHello")

        result = load_match(ScoredCandidate("cookbook/intro.md", 10, MatchStrategy.FILENAME_PATH), docs_root)

        assert result.ok
        assert result.file_content == "# Intro\nHello"

    def test_vanished_file(self, docs_root):
        result = load_match(ScoredCandidate("api-ref/gone.md", 10, MatchStrategy.FILENAME_PATH), docs_root)

        assert not result.ok
        assert result.file_content is None
        assert result.status_message == (
            "Found a potential match api-ref/gone.md, but an error occurred while reading its content."
        )
        assert result.error_message.startswith("Error reading file api-ref/gone.md")


class TestDocsRetriever:

    @pytest.fixture
    def retriever(self, docs_root):
        return DocsRetriever(docs_root)

    def test_content_match_returns_file(self, docs_root, retriever):
        _write(docs_root, "docs-section/intro.md", "# Intro\nHello Sarvam")

        result = retriever.retrieve("Hello Sarvam")

        assert result.retrieved_file_path == "docs-section/intro.md"
        assert result.file_content == "# Intro\nHello Sarvam"
        assert result.status_message == "Successfully retrieved documentation file: docs-section/intro.md"
        assert result.error_message is None

    def test_compound_term_prefers_matching_file(self, docs_root, retriever):
        _write(docs_root, "api-ref/text-to-speech.md", "# Text to Speech")
        _write(docs_root, "api-ref/transliterate.md", "# Transliterate")

        result = retriever.retrieve("text to speech pricing")

        assert result.retrieved_file_path == "api-ref/text-to-speech.md"
        assert result.file_content == "# Text to Speech"

    def test_restricted_to_doc_area(self, docs_root, retriever):
        _write(docs_root, "api-ref/translate.md", "# Translate API")
        _write(docs_root, "cookbook/translate.md", "# Translate cookbook")

        result = retriever.retrieve("translate", doc_area="cookbook")

        assert result.retrieved_file_path == "cookbook/translate.md"

    def test_non_utf8_file_is_skipped(self, docs_root, retriever):
        (docs_root / "cookbook").mkdir()
        (docs_root / "cookbook" / "broken.md").write_bytes(b"\xff\xfe zebra")
        _write(docs_root, "cookbook/good.md", "zebra crossing")

        result = retriever.retrieve("zebra")

        assert result.retrieved_file_path == "cookbook/good.md"

    def test_no_relevant_file(self, docs_root, retriever):
        _write(docs_root, "api-ref/translate.md", "# Translate")
        _write(docs_root, "cookbook/intro.md", "# Intro")

        result = retriever.retrieve("zebra")

        assert result.retrieved_file_path is None
        assert result.file_content is None
        assert result.error_message is None
        assert result.status_message == (
            'No relevant file found for "zebra" in areas: api-ref, cookbook, docs-section. '
            "Please try different keywords or check filenames."
        )

    def test_invalid_doc_area(self, docs_root, retriever):
        _write(docs_root, "api-ref/translate.md", "# Translate")

        result = retriever.retrieve("translate", doc_area="../")

        assert result.retrieved_file_path is None
        assert "invalid doc_area" in result.status_message.lower()
        assert "invalid doc_area" in result.error_message.lower()

    def test_doc_area_with_null_byte(self, docs_root, retriever):
        _write(docs_root, "api-ref/translate.md", "# Translate")

        result = retriever.retrieve("translate", doc_area="api-ref\x00")

        assert result.retrieved_file_path is None
        assert result.file_content is None
        assert "doc_area" in result.status_message
        assert result.error_message

    def test_missing_doc_area(self, docs_root, retriever):
        _write(docs_root, "api-ref/translate.md", "# Translate")

        result = retriever.retrieve("translate", doc_area="cookbook")

        assert result.retrieved_file_path is None
        assert result.status_message.startswith("Failed to list directory for specified doc_area: cookbook")
        assert result.error_message

    def test_empty_corpus(self, retriever):
        result = retriever.retrieve("anything")

        assert result.retrieved_file_path is None
        assert result.error_message is None
        assert result.status_message == (
            "No .md files found in the searched documentation areas: api-ref, cookbook, docs-section."
        )

    def test_repeated_calls_are_identical(self, docs_root, retriever):
        _write(docs_root, "api-ref/text-to-speech.md", "# Text to Speech")
        _write(docs_root, "cookbook/tts-guide.md", "# TTS guide")

        first = retriever.retrieve("text to speech")
        second = retriever.retrieve("text to speech")

        assert first.to_dict() == second.to_dict()
        assert first.retrieved_file_path == "api-ref/text-to-speech.md"

    def test_picks_up_new_files_between_calls(self, docs_root, retriever):
        _write(docs_root, "cookbook/intro.md", "# Intro")
        assert retriever.retrieve("zebra").retrieved_file_path == "cookbook/intro.md"

        _write(docs_root, "cookbook/zebra.md", "# Zebra")
        assert retriever.retrieve("zebra").retrieved_file_path == "cookbook/zebra.md"

    def test_result_dict_shape(self, docs_root, retriever):
        _write(docs_root, "cookbook/intro.md", "# Intro")

        data = retriever.retrieve("intro.md").to_dict()

        assert set(data) == {"retrieved_file_path", "file_content", "status_message", "error_message"}

    def test_from_config(self, docs_root):
        from sarvam_agents.common.config import DocsConfig

        _write(docs_root, "guides/intro.md", "# Intro")
        retriever = DocsRetriever.from_config(DocsConfig(root=str(docs_root), default_areas=["guides"]))

        assert retriever.docs_root == docs_root
        assert retriever.retrieve("intro").retrieved_file_path == "guides/intro.md"

    def test_custom_vocabulary(self, docs_root):
        _write(docs_root, "cookbook/wf.md", "# Widget Factory")
        _write(docs_root, "cookbook/other.md", "# Other")

        retriever = DocsRetriever(docs_root, core_terms={"widget factory": ["wf"]})

        assert retriever.retrieve("widget factory").retrieved_file_path == "cookbook/wf.md"
