"""Filing history — sessions of reversible move operations.

Each filing batch owns one session. A session records every move it
made with full before/after content so the whole batch can be replayed
in reverse. Sessions are append-only until undone; the history keeps only
the most recent sessions by start time.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

HISTORY_VERSION = 1
MAX_SESSIONS = 100

OperationAction = Literal["file", "queue"]


class Operation(BaseModel):
    """One relocation of a note."""

    model_config = {"frozen": True}

    action: OperationAction
    original_path: str
    target_path: str
    original_content: str
    new_content: str
    timestamp: str


class FilingSession(BaseModel):
    """A batch's ordered operations plus its undo marker."""

    model_config = {"frozen": True}

    start_time: str
    operations: list[Operation] = Field(default_factory=list)
    undone: bool = False
    undone_at: str | None = None


class FilingHistory(BaseModel):
    """The persisted history document, keyed by session id."""

    model_config = {"frozen": True}

    version: int = HISTORY_VERSION
    sessions: dict[str, FilingSession] = Field(default_factory=dict)


class SessionSummary(BaseModel):
    """Listing view of a session."""

    model_config = {"frozen": True}

    session_id: str
    start_time: str
    operation_count: int
    actions: list[str] = Field(default_factory=list)


def with_operation(
    history: FilingHistory,
    session_id: str,
    operation: Operation,
    *,
    started_at: str,
) -> FilingHistory:
    """Append *operation* to *session_id*, creating the session if needed."""
    session = history.sessions.get(session_id) or FilingSession(start_time=started_at)
    sessions = dict(history.sessions)
    sessions[session_id] = session.model_copy(
        update={"operations": [*session.operations, operation]}
    )
    return history.model_copy(update={"sessions": sessions})


def with_undone(history: FilingHistory, session_id: str, *, undone_at: str) -> FilingHistory:
    session = history.sessions[session_id]
    sessions = dict(history.sessions)
    sessions[session_id] = session.model_copy(update={"undone": True, "undone_at": undone_at})
    return history.model_copy(update={"sessions": sessions})


def pruned(history: FilingHistory, max_sessions: int = MAX_SESSIONS) -> FilingHistory:
    """Keep only the *max_sessions* most recent sessions by start time."""
    if len(history.sessions) <= max_sessions:
        return history
    newest = sorted(history.sessions.items(), key=lambda kv: kv[1].start_time, reverse=True)
    return history.model_copy(update={"sessions": dict(newest[:max_sessions])})


def undoable_sessions(history: FilingHistory, limit: int = 10) -> list[SessionSummary]:
    """Sessions not yet undone, most recent first."""
    live = [(sid, s) for sid, s in history.sessions.items() if not s.undone]
    live.sort(key=lambda kv: kv[1].start_time, reverse=True)
    return [
        SessionSummary(
            session_id=sid,
            start_time=s.start_time,
            operation_count=len(s.operations),
            actions=[op.action for op in s.operations],
        )
        for sid, s in live[:limit]
    ]
