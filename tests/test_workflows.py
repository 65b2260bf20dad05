"""Integration workflow tests — multi-step scenarios spanning multiple services.

These run against a real vault directory (filesystem store, JSON state
files) and exercise the hand-offs unit tests cannot catch: capture →
analysis → filing, manual correction → learned filing, and undo of a
session after later sessions exist.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from curator.config.settings import CuratorSettings
from curator.domain.content import parse_frontmatter, render_frontmatter, with_updates
from curator.domain.paths import basename
from curator.infrastructure.workspace import Workspace
from curator.services.capture import CaptureService
from curator.services.filing import FilingService
from curator.services.history import HistoryService
from curator.services.learning import LearningService


@pytest.fixture
def vault(settings: CuratorSettings) -> Workspace:
    """Workspace over the temp vault directory with on-disk state."""
    return Workspace(settings)


def _capture_and_analyze(vault: Workspace, text: str, **suggestion: Any) -> str:
    """Capture *text*, then attach an analysis block the way the analyzer would."""
    captured = CaptureService(vault).capture(text, source="telegram")
    assert captured.ok, captured.error
    path = captured.data["path"]

    note = vault.store.read(path)
    assert note is not None
    fm, body = parse_frontmatter(note.content)
    block = {"folder": "projects", "tags": [], "confidence": "high", **suggestion}
    vault.store.write(path, render_frontmatter(with_updates(fm, {"ai_suggestions": block}), body))
    return path


class TestDeepLearningNote:
    """Capture, analyze, and file one note at both ends of the confidence gate."""

    def test_high_confidence_is_filed(self, vault: Workspace) -> None:
        path = _capture_and_analyze(
            vault, "Deep learning observations", folder="projects/ai", confidence="high"
        )
        result = FilingService(vault).file_batch(min_confidence=0.7)
        assert (result.data["filed"], result.data["queued"]) == (1, 0)

        note = vault.store.read(f"projects/ai/{basename(path)}")
        assert note is not None
        fm, _ = parse_frontmatter(note.content)
        assert "ai_suggestions" not in fm
        assert fm["filed_by"] == "vault-curator"

    def test_low_confidence_is_queued(self, vault: Workspace) -> None:
        path = _capture_and_analyze(
            vault, "Deep learning observations", folder="projects/ai", confidence="low"
        )
        result = FilingService(vault).file_batch(min_confidence=0.7)
        assert (result.data["filed"], result.data["queued"]) == (0, 1)

        note = vault.store.read(f"inbox/review-queue/{basename(path)}")
        assert note is not None
        fm, _ = parse_frontmatter(note.content)
        assert fm["review_needed"] is True


class TestCaptureFileUndo:
    def test_round_trip(self, vault: Workspace, vault_root: Path) -> None:
        path = _capture_and_analyze(vault, "Draft the quarterly roadmap", tags=["planning"])
        analyzed = (vault_root / path).read_text(encoding="utf-8")

        filed = FilingService(vault).file_batch()
        assert filed.ok
        target = filed.data["details"][0]["target_path"]
        assert target == f"projects/{basename(path)}"

        fm, body = parse_frontmatter((vault_root / target).read_text(encoding="utf-8"))
        assert fm["source"] == "telegram"
        assert fm["tags"] == ["planning"]
        assert "ai_suggestions" not in fm
        assert body.strip() == "Draft the quarterly roadmap"
        assert (vault_root / ".curator" / "filing-history.json").is_file()

        undone = HistoryService(vault).undo_session()
        assert undone.ok
        assert (vault_root / path).read_text(encoding="utf-8") == analyzed
        assert not (vault_root / target).exists()

    def test_low_confidence_queue_and_undo(self, vault: Workspace, vault_root: Path) -> None:
        path = _capture_and_analyze(vault, "Something vague", confidence="low")
        svc = FilingService(vault)

        first = svc.file_batch()
        queued = first.data["details"][0]["target_path"]
        assert queued.startswith("inbox/review-queue/")
        assert svc.file_batch().data["processed"] == 0

        HistoryService(vault).undo_session(first.data["session_id"])
        assert (vault_root / path).is_file()
        assert not (vault_root / queued).exists()


class TestCorrectionLearning:
    def test_correction_steers_next_batch(self, vault: Workspace, vault_root: Path) -> None:
        # First note is filed where the analysis said...
        first = _capture_and_analyze(vault, "Tomato trellis ideas for the raised beds")
        filed = FilingService(vault).file_batch()
        wrong = filed.data["details"][0]["target_path"]
        assert wrong.startswith("projects/")

        # ...and the user moves it to the garden folder by hand.
        right = f"garden/{basename(first)}"
        note = vault.store.read(wrong)
        assert note is not None
        vault.store.write(right, note.content)
        vault.store.delete(wrong)
        learned = LearningService(vault).record_move(wrong, right)
        assert learned.data["recorded"] is True

        # The next tomato note goes straight to garden.
        _capture_and_analyze(vault, "Tomato seedlings are ready for the raised beds")
        second = FilingService(vault).file_batch()
        detail = second.data["details"][0]
        assert detail["folder_source"] == "learned"
        assert detail["target_path"].startswith("garden/")
        assert (vault_root / detail["target_path"]).is_file()

        # Undoing the newest session leaves the first one undoable.
        HistoryService(vault).undo_session()
        remaining = HistoryService(vault).recent_sessions().data["sessions"]
        assert [s["session_id"] for s in remaining] == [filed.data["session_id"]]

    def test_learning_survives_restart(self, settings: CuratorSettings) -> None:
        LearningService(Workspace(settings)).record_correction(
            "projects/a.md", "garden/a.md", "tomato compost seedlings"
        )
        hints = LearningService(Workspace(settings)).folder_hints("compost for tomato")
        assert hints.data["suggested_folder"] == "garden"


class TestOnDiskEdgeCases:
    def test_crlf_note_undone_byte_for_byte(self, vault: Workspace, vault_root: Path) -> None:
        raw = (
            b"---\r\nai_suggestions:\r\n  folder: projects\r\n  confidence: high\r\n"
            b"---\r\nLine one\r\nLine two\r\n"
        )
        (vault_root / "inbox" / "crlf.md").write_bytes(raw)

        filed = FilingService(vault).file_batch()
        assert filed.data["filed"] == 1
        HistoryService(vault).undo_session()
        assert (vault_root / "inbox" / "crlf.md").read_bytes() == raw

    def test_undecodable_files_do_not_stop_the_batch(
        self, vault: Workspace, vault_root: Path
    ) -> None:
        (vault_root / "projects").mkdir()
        (vault_root / "projects" / "a.md").write_bytes(b"caf\xe9 notes\n")
        (vault_root / "inbox" / "latin1.md").write_bytes(b"caf\xe9 in the inbox\n")
        for name in ("a", "b"):
            suggestion = {"folder": "projects", "confidence": "high"}
            content = render_frontmatter({"ai_suggestions": suggestion}, "Body\n")
            (vault_root / "inbox" / f"{name}.md").write_text(content, encoding="utf-8")

        result = FilingService(vault).file_batch()
        assert result.ok
        assert (result.data["filed"], result.data["skipped"]) == (2, 1)
        targets = sorted(d["target_path"] for d in result.data["details"] if "target_path" in d)
        # The unreadable file still occupies its name.
        assert targets == ["projects/a-1.md", "projects/b.md"]
        assert (vault_root / "projects" / "a.md").read_bytes() == b"caf\xe9 notes\n"
