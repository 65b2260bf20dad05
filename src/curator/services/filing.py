"""FilingService — move analyzed inbox notes to their folders.

Pipeline per note: GATE → RESOLVE → REWRITE → MOVE → RECORD

- GATE: notes below the confidence threshold go to the review queue.
- RESOLVE: a learned folder hint overrides the analysis folder; the
  target name gets ``-1``, ``-2``, ... until it is free.
- REWRITE: tags and filing markers replace the ``ai_suggestions`` block;
  related notes become a backlink section.
- MOVE: write the new copy, soft-delete the inbox copy.
- RECORD: append the operation to the session ledger for undo.

Notes are handled strictly one after another: each collision check must
see the writes of the notes filed before it in the same batch. A failure
on one note is recorded in the batch result and the batch carries on.
"""

from __future__ import annotations

from typing import Any

import structlog
from pydantic import BaseModel, Field, ValidationError

from curator.config.logging import session_context
from curator.domain.content import NoteDocument, render_frontmatter
from curator.domain.filing import (
    SUGGESTIONS_KEY,
    AISuggestion,
    collision_candidate,
    filed_frontmatter,
    parse_confidence,
    queued_frontmatter,
    target_path,
    with_related_section,
)
from curator.domain.ids import generate_session_id
from curator.domain.ledger import Operation, OperationAction
from curator.domain.paths import is_within
from curator.domain.sanitize import sanitize_text
from curator.errors import (
    CollisionExhaustedError,
    CuratorError,
    FrontmatterError,
    MalformedSuggestionError,
    NoteDecodeError,
)
from curator.services._helpers import now_iso
from curator.services.base import BaseService
from curator.services.history import HistoryService
from curator.services.learning import LearningService
from curator.services.result import ServiceResult

log = structlog.get_logger(__name__)

LOW_CONFIDENCE_REASON = "Low confidence"


class BatchResult(BaseModel):
    """Aggregate outcome of one filing batch."""

    session_id: str
    dry_run: bool = False
    processed: int = 0
    filed: int = 0
    queued: int = 0
    skipped: int = 0
    failed: int = 0
    details: list[dict[str, Any]] = Field(default_factory=list)
    message: str | None = None


class FilingService(BaseService):
    """Files analyzed inbox notes and records every move for undo."""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def file_batch(
        self,
        *,
        limit: int | None = None,
        min_confidence: float | None = None,
        dry_run: bool = False,
        session_id: str | None = None,
    ) -> ServiceResult:
        """File up to *limit* analyzed inbox notes.

        Notes whose confidence is below *min_confidence* are queued for
        review instead. With *dry_run* nothing is written: the result
        shows where each note would go.
        """
        op = "file_batch"
        cfg = self.settings.filer
        limit = cfg.default_limit if limit is None else limit
        min_confidence = cfg.min_confidence if min_confidence is None else min_confidence

        if limit < 1:
            return ServiceResult.failure(op, "INVALID_OPTION", "limit must be at least 1")
        if not 0.0 <= min_confidence <= 1.0:
            return ServiceResult.failure(
                op, "INVALID_OPTION", "min_confidence must be between 0.0 and 1.0"
            )

        session_id = session_id or generate_session_id()
        batch = BatchResult(session_id=session_id, dry_run=dry_run)
        warnings: list[str] = []

        try:
            candidates = self._processed_inbox_notes(batch)
        except CuratorError as exc:
            log.error("filing.enumeration_failed", error=str(exc))
            return ServiceResult.failure(
                op, "STORE_UNAVAILABLE", f"Cannot enumerate inbox notes: {exc}"
            )

        if not candidates:
            batch.message = "No processed notes found in inbox"

        with session_context(session_id):
            for note in candidates[:limit]:
                batch.processed += 1
                try:
                    detail = self._file_note(
                        note,
                        min_confidence=min_confidence,
                        dry_run=dry_run,
                        session_id=session_id,
                        warnings=warnings,
                    )
                except CuratorError as exc:
                    batch.failed += 1
                    batch.details.append(
                        {"path": note.path, "action": "failed", "error": str(exc)}
                    )
                    log.warning("filing.note_failed", path=note.path, error=str(exc))
                    continue

                if detail["action"] == "filed":
                    batch.filed += 1
                else:
                    batch.queued += 1
                batch.details.append(detail)

            log.info(
                "filing.batch_complete",
                dry_run=dry_run,
                filed=batch.filed,
                queued=batch.queued,
                skipped=batch.skipped,
                failed=batch.failed,
            )
        return ServiceResult(ok=True, op=op, data=batch.model_dump(), warnings=warnings)

    # ------------------------------------------------------------------
    # Enumeration
    # ------------------------------------------------------------------

    def _processed_inbox_notes(self, batch: BatchResult) -> list[NoteDocument]:
        """Inbox notes carrying an ``ai_suggestions`` block, in store order.

        The review queue is excluded so queued notes are not re-queued.
        Notes that are not UTF-8 or whose frontmatter cannot be parsed are
        recorded as skipped here and never reach the filing loop. An empty
        ``ai_suggestions`` block means the note was not analyzed yet. Any
        other store failure propagates: the inbox cannot be enumerated.
        """
        vault_cfg = self.settings.vault
        store = self._workspace.store
        candidates: list[NoteDocument] = []

        for ref in store.list_notes():
            if not is_within(ref.path, vault_cfg.inbox_path):
                continue
            if is_within(ref.path, vault_cfg.review_queue_path):
                continue
            try:
                stored = store.read(ref.path)
                if stored is None:
                    continue
                note = NoteDocument.from_content(stored.path, stored.content)
            except (NoteDecodeError, FrontmatterError) as exc:
                batch.skipped += 1
                batch.details.append({"path": ref.path, "action": "skipped", "reason": str(exc)})
                continue
            if note.frontmatter.get(SUGGESTIONS_KEY):
                candidates.append(note)
        return candidates

    # ------------------------------------------------------------------
    # Per-note pipeline
    # ------------------------------------------------------------------

    def _file_note(
        self,
        note: NoteDocument,
        *,
        min_confidence: float,
        dry_run: bool,
        session_id: str,
        warnings: list[str],
    ) -> dict[str, Any]:
        try:
            suggestion = AISuggestion.from_frontmatter(note.frontmatter)
        except (ValueError, ValidationError) as exc:
            raise MalformedSuggestionError(f"Malformed suggestion in {note.path}: {exc}") from exc
        if suggestion is None:
            raise MalformedSuggestionError(f"No suggestion block in {note.path}")
        confidence = parse_confidence(suggestion.confidence)

        # ── GATE ─────────────────────────────────────────────
        if confidence < min_confidence:
            return self._queue_note(
                note, confidence=confidence, dry_run=dry_run, session_id=session_id,
                warnings=warnings,
            )

        # ── RESOLVE ──────────────────────────────────────────
        folder, source = self._resolve_folder(note, suggestion, warnings)
        final_path = self._resolve_collision(target_path(folder, note.path))

        # ── REWRITE ──────────────────────────────────────────
        fm = filed_frontmatter(
            note.frontmatter,
            suggestion,
            filed_at=now_iso(),
            filed_by=self.settings.filer.filed_by,
        )
        body = with_related_section(note.body, suggestion.related)
        new_content = self._prepare(render_frontmatter(fm, body))

        detail: dict[str, Any] = {
            "path": note.path,
            "action": "filed",
            "target_path": final_path,
            "folder_source": source,
            "tags": list(suggestion.tags),
            "confidence": confidence,
        }
        if dry_run:
            detail["preview"] = True
            return detail

        # ── MOVE + RECORD ────────────────────────────────────
        self._move(note, final_path, new_content, "file", session_id, warnings)
        log.info("filing.note_filed", path=note.path, target_path=final_path, source=source)
        return detail

    def _queue_note(
        self,
        note: NoteDocument,
        *,
        confidence: float,
        dry_run: bool,
        session_id: str,
        warnings: list[str],
    ) -> dict[str, Any]:
        queue_path = self._resolve_collision(
            target_path(self.settings.vault.review_queue_path, note.path)
        )
        fm = queued_frontmatter(note.frontmatter, queued_at=now_iso())
        new_content = self._prepare(render_frontmatter(fm, note.body))

        detail: dict[str, Any] = {
            "path": note.path,
            "action": "queued",
            "target_path": queue_path,
            "reason": LOW_CONFIDENCE_REASON,
            "confidence": confidence,
        }
        if dry_run:
            detail["preview"] = True
            return detail

        self._move(note, queue_path, new_content, "queue", session_id, warnings)
        log.info("filing.note_queued", path=note.path, target_path=queue_path)
        return detail

    def _resolve_folder(
        self, note: NoteDocument, suggestion: AISuggestion, warnings: list[str]
    ) -> tuple[str, str]:
        """Pick the target folder; a learned hint beats the analysis suggestion."""
        if self.settings.filer.enable_learning:
            hints = LearningService(self._workspace).folder_hints(note.body)
            if not hints.ok:
                msg = hints.error.message if hints.error else "unknown error"
                warnings.append(f"Folder hints unavailable for {note.path}: {msg}")
            elif hints.data.get("suggested_folder"):
                return str(hints.data["suggested_folder"]), "learned"

        if not suggestion.folder:
            raise MalformedSuggestionError(f"No target folder suggested for {note.path}")
        return suggestion.folder, "suggested"

    def _resolve_collision(self, path: str) -> str:
        """First free variant of *path*: itself, then ``-1``, ``-2``, ..."""
        store = self._workspace.store
        max_attempts = self.settings.filer.max_collision_attempts
        for attempt in range(max_attempts + 1):
            candidate = collision_candidate(path, attempt)
            try:
                if store.read(candidate) is None:
                    return candidate
            except NoteDecodeError:
                # An undecodable file still occupies the name.
                continue
        raise CollisionExhaustedError(path, max_attempts)

    def _prepare(self, content: str) -> str:
        if self.settings.vault.sanitize_unicode:
            return sanitize_text(content)
        return content

    def _move(
        self,
        note: NoteDocument,
        target: str,
        new_content: str,
        action: OperationAction,
        session_id: str,
        warnings: list[str],
    ) -> None:
        store = self._workspace.store
        store.write(target, new_content)
        try:
            store.delete(note.path)
        except CuratorError:
            self._discard_copy(target)
            raise

        operation = Operation(
            action=action,
            original_path=note.path,
            target_path=target,
            original_content=note.content,
            new_content=new_content,
            timestamp=now_iso(),
        )
        recorded = HistoryService(self._workspace).append_operation(session_id, operation)
        if not recorded.ok:
            msg = recorded.error.message if recorded.error else "unknown error"
            warnings.append(f"Moved {note.path} but could not record it for undo: {msg}")
            log.error("filing.ledger_append_failed", path=note.path, error=msg)

    def _discard_copy(self, target: str) -> None:
        """Remove a freshly written copy whose original could not be deleted.

        Nothing was recorded for undo yet, so leaving the copy would file
        the note twice on the next batch.
        """
        try:
            self._workspace.store.delete(target)
        except CuratorError as exc:
            log.error("filing.rollback_failed", target_path=target, error=str(exc))
