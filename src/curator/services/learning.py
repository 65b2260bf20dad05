"""LearningService — learn folder preferences from manual corrections.

Only corrections a user makes by hand are recorded here; the filing
service's own moves never feed back into the learner. The learner's
state is one document, read and rewritten whole on every update.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError

from curator.domain.content import NoteDocument
from curator.domain.keywords import extract_keywords
from curator.domain.learning import (
    Correction,
    FolderHints,
    LearningState,
    score_folders,
    with_correction,
)
from curator.domain.paths import basename, folder_of, note_key
from curator.domain.sanitize import sanitize_value
from curator.errors import FrontmatterError, StoreError
from curator.services._helpers import now_iso
from curator.services.base import BaseService
from curator.services.result import ServiceResult

if TYPE_CHECKING:
    from curator.infrastructure.store import StoredNote

log = structlog.get_logger(__name__)


class LearningService(BaseService):
    """Tracks corrections and turns them into folder hints."""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def record_correction(
        self, original_path: str, corrected_path: str, content: str
    ) -> ServiceResult:
        """Record that a note was moved from *original_path* to *corrected_path*.

        A move within the same folder carries no classification signal
        and is ignored.
        """
        op = "record_correction"
        original_folder = folder_of(original_path)
        corrected_folder = folder_of(corrected_path)

        if note_key(original_folder) == note_key(corrected_folder):
            return ServiceResult(
                ok=True,
                op=op,
                data={"recorded": False, "folder": corrected_folder},
                warnings=["Same folder; nothing to learn"],
            )

        cfg = self.settings.learning
        try:
            state = self._load()
        except StoreError as exc:
            return ServiceResult.failure(op, "STATE_UNREADABLE", str(exc))

        keywords = extract_keywords(content, limit=cfg.max_keywords)
        correction = Correction(
            timestamp=now_iso(),
            original_folder=original_folder,
            corrected_folder=corrected_folder,
            keywords=keywords[: cfg.stored_keywords],
            note_basename=basename(corrected_path),
        )
        state = with_correction(state, correction, keywords, max_corrections=cfg.max_corrections)

        try:
            self._save(state)
        except StoreError as exc:
            return ServiceResult.failure(op, "STATE_UNWRITABLE", str(exc))

        log.info(
            "learning.correction_recorded",
            original_folder=original_folder,
            corrected_folder=corrected_folder,
            keywords=len(keywords),
        )
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "recorded": True,
                "original_folder": original_folder,
                "corrected_folder": corrected_folder,
                "keywords": correction.keywords,
            },
        )

    def record_move(self, original_path: str, corrected_path: str) -> ServiceResult:
        """Record a correction, reading the note from the store.

        The note is looked up at *corrected_path* first (already moved by
        hand), then at *original_path*.
        """
        op = "record_correction"
        try:
            stored = self._read_first(corrected_path, original_path)
        except StoreError as exc:
            return ServiceResult.failure(op, "STORE_UNAVAILABLE", str(exc))
        if stored is None:
            return ServiceResult.failure(
                op, "NOTE_NOT_FOUND", f"Note not found: {corrected_path}", path=corrected_path
            )
        return self.record_correction(original_path, corrected_path, stored.content)

    def hints_for_note(self, path: str) -> ServiceResult:
        """Folder hints for the body of the note at *path*."""
        op = "folder_hints"
        try:
            stored = self._read_first(path)
        except StoreError as exc:
            return ServiceResult.failure(op, "STORE_UNAVAILABLE", str(exc))
        if stored is None:
            return ServiceResult.failure(op, "NOTE_NOT_FOUND", f"Note not found: {path}", path=path)
        try:
            note = NoteDocument.from_content(stored.path, stored.content)
        except FrontmatterError as exc:
            return ServiceResult.failure(op, "BAD_FRONTMATTER", str(exc), path=path)
        return self.folder_hints(note.body)

    def folder_hints(self, content: str) -> ServiceResult:
        """Score *content* against learned folders."""
        op = "folder_hints"
        try:
            state = self._load()
        except StoreError as exc:
            return ServiceResult.failure(op, "STATE_UNREADABLE", str(exc))

        if not state.folder_patterns:
            hints = FolderHints()
        else:
            keywords = extract_keywords(content, limit=self.settings.learning.max_keywords)
            hints = score_folders(state, keywords)
        return ServiceResult(ok=True, op=op, data=hints.model_dump())

    def stats(self) -> ServiceResult:
        """Summary of what has been learned so far."""
        op = "learning_stats"
        try:
            state = self._load()
        except StoreError as exc:
            return ServiceResult.failure(op, "STATE_UNREADABLE", str(exc))
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "total_corrections": len(state.corrections),
                "folders_learned": len(state.folder_patterns),
                "last_correction_date": (
                    state.corrections[-1].timestamp if state.corrections else None
                ),
            },
        )

    def reset(self) -> ServiceResult:
        """Forget every correction and folder pattern."""
        op = "learning_reset"
        try:
            self._save(LearningState())
        except StoreError as exc:
            return ServiceResult.failure(op, "STATE_UNWRITABLE", str(exc))
        log.info("learning.reset")
        return ServiceResult(ok=True, op=op, data={"reset": True})

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _read_first(self, *paths: str) -> StoredNote | None:
        store = self._workspace.store
        for path in paths:
            stored = store.read(path)
            if stored is not None:
                return stored
        return None

    def _load(self) -> LearningState:
        raw = self._workspace.learning_storage.load()
        if raw is None:
            return LearningState()
        try:
            return LearningState.model_validate(raw)
        except ValidationError as exc:
            raise StoreError(f"Learning state is malformed: {exc}") from exc

    def _save(self, state: LearningState) -> None:
        data = state.model_dump(mode="json")
        if self.settings.vault.sanitize_unicode:
            data = sanitize_value(data)
        self._workspace.learning_storage.save(data)
