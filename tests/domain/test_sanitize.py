"""Tests for ASCII sanitization of persisted text."""

from curator.domain.sanitize import sanitize_text, sanitize_value


class TestSanitizeText:
    def test_symbol_replacements(self) -> None:
        expected = "[DONE] done [FAIL] broken [WARN] careful"
        assert sanitize_text("✅ done ❌ broken ⚠️ careful") == expected
        assert sanitize_text("a → b ✓ ✗") == "a -> b [OK] [X]"

    def test_named_emoji(self) -> None:
        assert sanitize_text("\U0001f4dd \U0001f4a1 \U0001f525 ⭐") == "[NOTE] [IDEA] [HOT] [STAR]"

    def test_other_emoji_dropped(self) -> None:
        assert sanitize_text("party \U0001f389 time") == "party  time"

    def test_non_ascii_stripped(self) -> None:
        assert sanitize_text("café naïve") == "caf nave"

    def test_ascii_untouched(self) -> None:
        text = "---\ntitle: plain\n---\nBody [[link]]\n"
        assert sanitize_text(text) == text


class TestSanitizeValue:
    def test_recurses(self) -> None:
        value = {"café": ["✅ ok", 3, {"nested": "→"}], "n": None}
        assert sanitize_value(value) == {"café": ["[DONE] ok", 3, {"nested": "->"}], "n": None}

    def test_keys_kept(self) -> None:
        assert sanitize_value({"jardín": {"résumé": "café ✅"}}) == {
            "jardín": {"résumé": "caf [DONE]"}
        }
