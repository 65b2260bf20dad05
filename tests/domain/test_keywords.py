"""Tests for keyword extraction."""

from curator.domain.keywords import MAX_KEYWORDS, extract_keywords


class TestExtractKeywords:
    def test_frequency_order(self) -> None:
        text = "garden tomato garden seeds tomato garden"
        assert extract_keywords(text) == ["garden", "tomato", "seeds"]

    def test_ties_keep_first_occurrence(self) -> None:
        assert extract_keywords("zebra apple mango") == ["zebra", "apple", "mango"]

    def test_drops_short_words_and_stop_words(self) -> None:
        assert extract_keywords("the cat and this which python") == ["python"]

    def test_strips_frontmatter_block(self) -> None:
        text = "---\nsecret: frontmatter\n---\nvisible words here"
        assert "secret:" not in extract_keywords(text)
        assert "frontmatter" not in extract_keywords(text)
        assert extract_keywords(text) == ["visible", "words", "here"]

    def test_strips_markdown_symbols_and_lowercases(self) -> None:
        text = "# Heading\n**Bold** [[Link]] `code` (paren)"
        assert extract_keywords(text) == ["heading", "bold", "link", "code", "paren"]

    def test_limit(self) -> None:
        text = " ".join(f"word{i:03d}" for i in range(50))
        assert len(extract_keywords(text)) == MAX_KEYWORDS
        assert len(extract_keywords(text, limit=5)) == 5

    def test_empty(self) -> None:
        assert extract_keywords("") == []
