"""Unit tests for excerpt generation and highlighting."""

from content_search.search.snippet import generate_excerpt, highlight_terms


class TestGenerateExcerpt:
    def test_strips_markdown_markers(self):
        assert generate_excerpt("## The `event` loop is **simple**") == "The event loop is simple"

    def test_short_text_is_returned_unchanged(self):
        assert generate_excerpt("Short answer.", max_length=150) == "Short answer."

    def test_long_text_is_cut_on_word_boundary(self):
        text = "Readable streams pause when the writable side buffer is full"
        excerpt = generate_excerpt(text, max_length=20)

        assert excerpt == "Readable streams..."
        assert len(excerpt) <= 20 + len("...")

    def test_hard_cut_when_no_space(self):
        assert generate_excerpt("abcdefghijklmnop", max_length=5) == "abcde..."

    def test_empty_content(self):
        assert generate_excerpt("") == ""


class TestHighlightTerms:
    def test_plain_style(self):
        assert highlight_terms("Event Loop basics", ["event"]) == "[[Event]] Loop basics"

    def test_html_style(self):
        assert highlight_terms("Event Loop", ["loop"], style="html") == "Event <mark>Loop</mark>"

    def test_prefers_longer_overlapping_match(self):
        assert highlight_terms("eventual", ["event", "eventual"]) == "[[eventual]]"

    def test_ignores_single_character_terms(self):
        assert highlight_terms("a b c", ["a"]) == "a b c"

    def test_respects_max_highlights(self):
        assert highlight_terms("loop loop loop", ["loop"], max_highlights=2) == "[[loop]] [[loop]] loop"

    def test_no_terms_returns_text(self):
        assert highlight_terms("Event Loop", []) == "Event Loop"
