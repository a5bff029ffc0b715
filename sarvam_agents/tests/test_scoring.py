"""
Tests for filename/path and content/heading scoring
"""

import math

import pytest

from sarvam_agents.common.schemas import MatchStrategy
from sarvam_agents.retriever.query_processor import QueryProcessor
from sarvam_agents.retriever.scoring import (
    ScoredCandidate,
    combine_scores,
    content_score,
    exact_filename_match,
    extract_headings,
    filename_score,
    score_by_content,
    score_by_name,
)


@pytest.fixture
def parse():
    return QueryProcessor().parse


class TestExactFilenameMatch:

    def test_bare_filename(self, parse):
        match = exact_filename_match(["api-ref/translate.md", "cookbook/intro.md"], parse("intro.md"))

        assert match.file == "cookbook/intro.md"
        assert math.isinf(match.score)
        assert match.is_exact
        assert match.strategy == MatchStrategy.EXACT_FILENAME

    def test_area_qualified_path_preferred(self, parse):
        candidates = ["api-ref/translate.md", "cookbook/translate.md"]

        match = exact_filename_match(candidates, parse("cookbook/translate.md"))

        assert match.file == "cookbook/translate.md"

    def test_case_insensitive(self, parse):
        match = exact_filename_match(["api-ref/Sarvam-Parse.md"], parse("sarvam-parse.md"))

        assert match.file == "api-ref/Sarvam-Parse.md"

    def test_only_for_markdown_queries(self, parse):
        assert exact_filename_match(["api-ref/intro.md"], parse("intro")) is None

    def test_no_match(self, parse):
        assert exact_filename_match(["api-ref/intro.md"], parse("missing.md")) is None


class TestFilenameScore:

    def test_core_term_in_filename(self, parse):
        query = parse("text to speech pricing")

        assert filename_score("api-ref/text-to-speech.md", query) == 30
        assert filename_score("api-ref/transliterate.md", query) == 0

    def test_core_term_in_path_only(self, parse):
        query = parse("text to speech")

        # +15 for the path, no filename or direct-hit bonus
        assert filename_score("text-to-speech/overview.md", query) == 15

    def test_direct_hit_bonus_scales_with_core_terms(self, parse):
        # core +30, hyphenated query in stem +25 x (1 + 1)
        assert filename_score("api-ref/rate-limits.md", parse("rate limits")) == 80

    def test_secondary_terms_and_hyphenated_hit(self, parse):
        # getting +10, started +10, "getting-started" in stem +25
        assert filename_score("cookbook/getting-started.md", parse("getting started")) == 45

    def test_raw_query_in_filename(self, parse):
        # my +10, guide +10, raw "my guide" in filename +20
        assert filename_score("cookbook/my guide.md", parse("my guide")) == 40

    def test_secondary_term_in_path_only(self, parse):
        assert filename_score("cookbook/intro.md", parse("cookbook")) == 5

    def test_all_core_terms_in_filename(self, parse):
        query = parse("text analytics and call analytics")

        # two core terms in filename (+60) and all-present bonus (+20)
        assert filename_score("api-ref/call-analytics-vs-text-analytics.md", query) == 80

    def test_partial_core_terms_in_filename(self, parse):
        query = parse("call analytics text analytics api key")
        assert query.core_count == 3

        # two of three core terms (+60) and partial bonus 10 x 2
        assert filename_score("cookbook/call-analytics-text-analytics.md", query) == 80


class TestScoreByName:

    def test_zero_scores_dropped_and_sorted(self, parse):
        candidates = ["api-ref/transliterate.md", "cookbook/tts-guide.md", "api-ref/text-to-speech.md"]

        scored = score_by_name(candidates, parse("text to speech"))

        assert [c.file for c in scored] == ["api-ref/text-to-speech.md", "cookbook/tts-guide.md"]
        assert all(c.strategy == MatchStrategy.FILENAME_PATH for c in scored)

    def test_ties_keep_enumeration_order(self, parse):
        candidates = ["cookbook/voice.md", "api-ref/voice-b.md", "api-ref/voice-a.md"]

        scored = score_by_name(candidates, parse("voice"))

        assert [c.file for c in scored] == candidates


class TestContentScore:

    def test_extract_headings(self):
        content = "# Intro\nbody text\n  ## Setup\nnot # a heading\n###Deep"

        assert extract_headings(content) == ["Intro", "Setup", "Deep"]

    def test_fenced_code_is_not_a_heading(self):
        content = "# Usage\n```bash\n# install the client\npip install sarvamai\n```\n~~~\n# text to speech\n~~~\n## After"

        assert extract_headings(content) == ["Usage", "After"]

    def test_fenced_comment_adds_no_heading_weight(self, parse):
        query = parse("text to speech")
        plain = "text to speech example"
        fenced = plain + "\n```python\n# text to speech\n```"

        assert content_score(fenced, query) == content_score(plain, query)

    def test_core_term_content_and_headings(self, parse):
        content = "# call analytics\n## call analytics setup\nuse call analytics."

        # content +10, two headings +50, query in content 15 x 2, query in heading 30 x 2
        assert content_score(content, parse("call analytics")) == 150

    def test_secondary_terms(self, parse):
        content = "# intro\nhello sarvam"

        # hello +2, sarvam +2, full query in content +15
        assert content_score(content, parse("hello sarvam")) == 19

    def test_partial_core_presence(self, parse):
        query = parse("call analytics and text analytics")
        content = "call analytics only"

        # call analytics +10, partial co-occurrence 5 x 1, "and" absent
        assert content_score(content, query) == 15

    def test_all_core_presence(self, parse):
        query = parse("call analytics and text analytics")
        content = "call analytics, text analytics"

        # +10 +10, all-present +20
        assert content_score(content, query) == 40

    def test_extra_heading_never_decreases_score(self, parse):
        query = parse("text to speech voices")
        before = "# overview\ntext to speech voices are listed below"
        after = before + "\n## text to speech"

        assert content_score(after, query) > content_score(before, query)

    def test_combine_scores(self):
        assert combine_scores(0, 12) == 12
        assert combine_scores(30, 10) == 40
        assert combine_scores(40, 10) == 45
        assert combine_scores(80, 0) == 80


class TestScoreByContent:

    @pytest.fixture
    def root(self, tmp_path):
        (tmp_path / "api-ref").mkdir()
        (tmp_path / "cookbook").mkdir()
        return tmp_path

    def test_weak_prior_is_overtaken(self, root, parse):
        (root / "api-ref" / "text-to-speech.md").write_text("# Overview\nnothing here")
        (root / "cookbook" / "voice-guide.md").write_text(
            "# Text to Speech\n## Text to Speech voices\ntext to speech pricing details"
        )
        candidates = ["api-ref/text-to-speech.md", "cookbook/voice-guide.md"]
        prior = ScoredCandidate("api-ref/text-to-speech.md", 30, MatchStrategy.FILENAME_PATH)

        best = score_by_content(candidates, parse("text to speech pricing"), root, prior_best=prior)

        assert best.file == "cookbook/voice-guide.md"
        assert best.strategy == MatchStrategy.CONTENT_HEADING
        assert best.score == 92

    def test_prior_best_wins_ties_by_scan_order(self, root, parse):
        (root / "api-ref" / "a.md").write_text("voice")
        (root / "api-ref" / "b.md").write_text("voice")
        candidates = ["api-ref/a.md", "api-ref/b.md"]
        prior = ScoredCandidate("api-ref/b.md", 0, MatchStrategy.FILENAME_PATH)

        best = score_by_content(candidates, parse("voice"), root, prior_best=prior)

        assert best.file == "api-ref/b.md"

    def test_all_zero_returns_none(self, root, parse):
        (root / "api-ref" / "a.md").write_text("nothing relevant")

        assert score_by_content(["api-ref/a.md"], parse("zebra"), root) is None

    def test_unreadable_file_is_skipped(self, root, parse):
        (root / "api-ref" / "broken.md").write_bytes(b"\xff\xfe\xfa zebra")
        (root / "api-ref" / "good.md").write_text("zebra crossing")
        candidates = ["api-ref/broken.md", "api-ref/missing.md", "api-ref/good.md"]

        best = score_by_content(candidates, parse("zebra"), root)

        assert best.file == "api-ref/good.md"
