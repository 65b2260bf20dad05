"""HistoryService — the filing ledger and session undo.

Every move the filing service makes is appended here with its full
before/after content. Undo replays a session's operations newest-first:
restore the original note, then remove the moved copy. A failure on one
operation is recorded and the rest of the session still unwinds.

Undoing a session twice is rejected; the second attempt touches nothing.
"""

from __future__ import annotations

from typing import Any

import structlog
from pydantic import ValidationError

from curator.domain.ledger import (
    FilingHistory,
    FilingSession,
    Operation,
    pruned,
    undoable_sessions,
    with_operation,
    with_undone,
)
from curator.domain.paths import note_key
from curator.errors import CuratorError, NoteNotFoundError, SessionNotFoundError, StoreError
from curator.services._helpers import now_iso
from curator.services.base import BaseService
from curator.services.result import ServiceResult

log = structlog.get_logger(__name__)


class HistoryService(BaseService):
    """Records filing sessions and reverses them on request."""

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------

    def append_operation(self, session_id: str, operation: Operation) -> ServiceResult:
        """Append *operation* to *session_id*, creating the session on first use.

        Appending an operation the session already holds is a no-op.
        """
        op = "append_operation"
        try:
            history = self._load()
        except StoreError as exc:
            return ServiceResult.failure(op, "STATE_UNREADABLE", str(exc))

        existing = history.sessions.get(session_id)
        if existing is not None and operation in existing.operations:
            return ServiceResult(
                ok=True,
                op=op,
                data={"session_id": session_id, "appended": False},
            )

        history = with_operation(history, session_id, operation, started_at=now_iso())
        try:
            self._save(history)
        except StoreError as exc:
            return ServiceResult.failure(op, "STATE_UNWRITABLE", str(exc))

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "session_id": session_id,
                "appended": True,
                "operation_count": len(history.sessions[session_id].operations),
            },
        )

    # ------------------------------------------------------------------
    # Undo
    # ------------------------------------------------------------------

    def undo_session(self, session_id: str | None = None) -> ServiceResult:
        """Reverse every operation of *session_id* (default: latest undoable)."""
        op = "undo_session"
        try:
            history = self._load()
        except StoreError as exc:
            return ServiceResult.failure(op, "STATE_UNREADABLE", str(exc))

        if session_id is None:
            session_id = _latest_undoable_id(history)
            if session_id is None:
                return ServiceResult.failure(
                    op, "NO_SESSIONS", "No filing sessions found to undo"
                )

        try:
            session = _require_session(history, session_id)
        except SessionNotFoundError as exc:
            return ServiceResult.failure(op, exc.code, str(exc), session_id=session_id)
        if session.undone:
            return ServiceResult.failure(
                op,
                "SESSION_ALREADY_UNDONE",
                f"Session {session_id} was already undone at {session.undone_at}",
                session_id=session_id,
            )

        store = self._workspace.store
        undone = 0
        failed = 0
        details: list[dict[str, Any]] = []

        for operation in reversed(session.operations):
            try:
                store.write(operation.original_path, operation.original_content)
                if note_key(operation.target_path) != note_key(operation.original_path):
                    try:
                        store.delete(operation.target_path)
                    except NoteNotFoundError:
                        # Removed by hand since filing; nothing left to undo.
                        log.debug("undo.target_missing", target_path=operation.target_path)
            except CuratorError as exc:
                failed += 1
                details.append(
                    {
                        "action": operation.action,
                        "path": operation.original_path,
                        "target_path": operation.target_path,
                        "status": "failed",
                        "error": str(exc),
                    }
                )
                log.warning(
                    "undo.operation_failed",
                    session_id=session_id,
                    path=operation.original_path,
                    error=str(exc),
                )
                continue
            undone += 1
            details.append(
                {
                    "action": operation.action,
                    "path": operation.original_path,
                    "target_path": operation.target_path,
                    "status": "undone",
                }
            )

        history = with_undone(history, session_id, undone_at=now_iso())
        warnings: list[str] = []
        try:
            self._save(history)
        except StoreError as exc:
            warnings.append(f"Undo applied but history not saved: {exc}")

        if failed:
            warnings.append(f"{failed} operation(s) could not be undone")
        log.info("undo.session_undone", session_id=session_id, undone=undone, failed=failed)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "session_id": session_id,
                "undone": undone,
                "failed": failed,
                "details": details,
            },
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def recent_sessions(self, limit: int = 10) -> ServiceResult:
        """Sessions that can still be undone, most recent first."""
        op = "recent_sessions"
        try:
            history = self._load()
        except StoreError as exc:
            return ServiceResult.failure(op, "STATE_UNREADABLE", str(exc))
        sessions = [s.model_dump() for s in undoable_sessions(history, limit=limit)]
        return ServiceResult(ok=True, op=op, data={"count": len(sessions), "sessions": sessions})

    def latest_undoable(self) -> ServiceResult:
        """The most recent session that has not been undone yet."""
        op = "latest_undoable"
        try:
            history = self._load()
        except StoreError as exc:
            return ServiceResult.failure(op, "STATE_UNREADABLE", str(exc))
        session_id = _latest_undoable_id(history)
        if session_id is None:
            return ServiceResult.failure(op, "NO_SESSIONS", "No filing sessions found to undo")
        session = history.sessions[session_id]
        return ServiceResult(
            ok=True, op=op, data={"session_id": session_id, **session.model_dump()}
        )

    def get_session(self, session_id: str) -> ServiceResult:
        op = "get_session"
        try:
            history = self._load()
        except StoreError as exc:
            return ServiceResult.failure(op, "STATE_UNREADABLE", str(exc))
        try:
            session = _require_session(history, session_id)
        except SessionNotFoundError as exc:
            return ServiceResult.failure(op, exc.code, str(exc), session_id=session_id)
        return ServiceResult(
            ok=True, op=op, data={"session_id": session_id, **session.model_dump()}
        )

    def clear(self) -> ServiceResult:
        """Drop every recorded session. Nothing can be undone afterwards."""
        op = "clear_history"
        try:
            self._save(FilingHistory())
        except StoreError as exc:
            return ServiceResult.failure(op, "STATE_UNWRITABLE", str(exc))
        log.info("history.cleared")
        return ServiceResult(ok=True, op=op, data={"cleared": True})

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _load(self) -> FilingHistory:
        raw = self._workspace.history_storage.load()
        if raw is None:
            return FilingHistory()
        try:
            return FilingHistory.model_validate(raw)
        except ValidationError as exc:
            raise StoreError(f"Filing history is malformed: {exc}") from exc

    def _save(self, history: FilingHistory) -> None:
        history = pruned(history, self.settings.history.max_sessions)
        self._workspace.history_storage.save(history.model_dump(mode="json"))


def _latest_undoable_id(history: FilingHistory) -> str | None:
    recent = undoable_sessions(history, limit=1)
    return recent[0].session_id if recent else None


def _require_session(history: FilingHistory, session_id: str) -> FilingSession:
    session = history.sessions.get(session_id)
    if session is None:
        raise SessionNotFoundError(session_id)
    return session
