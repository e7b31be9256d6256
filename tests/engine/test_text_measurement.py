"""Tests for TextMetricsEngine and LineBreaker."""

import pytest

from pageflow.engine import text_metrics
from pageflow.engine.line_breaker import LineBreaker
from pageflow.engine.text_metrics import FontSpec, TextMetricsEngine


BODY = FontSpec(size=11.0)
SAMPLE = (
    "Layout engines place text on pages by measuring every word against the "
    "column width and starting a new line whenever the next word would overflow it."
)


@pytest.fixture
def metrics():
    return TextMetricsEngine()


class TestTextMetricsEngine:
    """Test suite for TextMetricsEngine."""

    def test_empty_text_has_no_width(self, metrics):
        assert metrics.text_width("", BODY) == 0.0

    def test_width_in_millimetres(self, metrics):
        # Helvetica "layout" is 2.668 em
        assert metrics.text_width("layout", BODY) == pytest.approx(2.668 * 11 * 25.4 / 72, rel=1e-3)

    def test_bold_is_wider(self, metrics):
        text = "Quarterly results"
        assert metrics.text_width(text, FontSpec(11, bold=True)) > metrics.text_width(text, BODY)

    def test_width_scales_with_size(self, metrics):
        assert metrics.text_width("abc", FontSpec(22)) == pytest.approx(2 * metrics.text_width("abc", BODY))

    def test_width_cache_is_bounded_and_shared(self, metrics):
        cache_info = text_metrics._string_width.cache_info
        assert cache_info().maxsize == text_metrics.WIDTH_CACHE_SIZE

        metrics.text_width("shared prefix", BODY)
        hits = cache_info().hits
        TextMetricsEngine().text_width("shared prefix", BODY)

        assert cache_info().hits == hits + 1

    def test_truncate_keeps_fitting_text(self, metrics):
        assert metrics.truncate("Short", BODY, 100.0) == "Short"

    def test_truncate_adds_ellipsis(self, metrics):
        title = "A very long report title that cannot possibly fit into the header band"

        result = metrics.truncate(title, FontSpec(12, bold=True), 40.0)

        assert result.endswith("...")
        assert metrics.text_width(result, FontSpec(12, bold=True)) <= 40.0
        assert title.startswith(result[:-3])


class TestLineBreaker:
    """Test suite for LineBreaker."""

    def test_lines_fit_width(self, metrics):
        breaker = LineBreaker(metrics)

        lines = breaker.break_text(SAMPLE, 60.0, BODY)

        assert len(lines) > 1
        assert all(metrics.text_width(line, BODY) <= 60.0 for line in lines)

    def test_no_words_lost(self, metrics):
        lines = LineBreaker(metrics).break_text(SAMPLE, 60.0, BODY)

        assert " ".join(lines) == SAMPLE

    def test_empty_text(self, metrics):
        assert LineBreaker(metrics).break_text("   ", 60.0, BODY) == []

    def test_oversize_word_gets_own_line(self, metrics):
        breaker = LineBreaker(metrics)
        words = ["a", "Pneumonoultramicroscopicsilicovolcanoconiosis", "b"]

        line, index = breaker.next_line(words, 1, 20.0, BODY)

        assert line == words[1]
        assert index == 2

    def test_next_line_consumes_at_least_one_word(self, metrics):
        line, index = LineBreaker(metrics).next_line(["word"], 0, 0.1, BODY)

        assert (line, index) == ("word", 1)

    def test_next_line_past_end(self, metrics):
        assert LineBreaker(metrics).next_line(["a"], 1, 50.0, BODY) == ("", 1)

    def test_fifteen_words_per_body_line(self, metrics):
        """Fifteen "layout" words fill a full A4 content line at 11pt."""
        words = ["layout"] * 40

        line, index = LineBreaker(metrics).next_line(words, 0, 180.0, BODY)

        assert index == 15
        assert line.count("layout") == 15
