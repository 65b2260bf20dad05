"""Tests for filing session id generation."""

from curator.domain.ids import SESSION_ID_PATTERN, generate_session_id


class TestGenerateSessionId:
    def test_format(self) -> None:
        assert SESSION_ID_PATTERN.match(generate_session_id())

    def test_unique(self) -> None:
        ids = {generate_session_id() for _ in range(200)}
        assert len(ids) == 200
