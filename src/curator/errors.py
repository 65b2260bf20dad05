"""Exception hierarchy for curator.

Core helpers raise these; the service layer translates them into
``ServiceResult`` errors or per-note failure details so that callers
always receive a structured report.
"""

from __future__ import annotations


class CuratorError(Exception):
    """Base class for all curator errors."""

    code: str = "CURATOR_ERROR"


class StoreError(CuratorError):
    """A note store operation failed (I/O, transport, protocol)."""

    code = "STORE_ERROR"


class NoteNotFoundError(StoreError):
    """No live note exists at the requested path."""

    code = "NOTE_NOT_FOUND"

    def __init__(self, path: str) -> None:
        super().__init__(f"Note not found: {path}")
        self.path = path


class CollisionExhaustedError(CuratorError):
    """Every numbered variant of a target path is already taken."""

    code = "COLLISION_EXHAUSTED"

    def __init__(self, path: str, attempts: int) -> None:
        super().__init__(f"Too many collisions for {path} ({attempts} attempts)")
        self.path = path
        self.attempts = attempts


class SessionNotFoundError(CuratorError):
    """The filing history holds no session with the requested id."""

    code = "SESSION_NOT_FOUND"

    def __init__(self, session_id: str) -> None:
        super().__init__(f"Session {session_id} not found")
        self.session_id = session_id


class MalformedSuggestionError(CuratorError):
    """A note's ``ai_suggestions`` block cannot be interpreted."""

    code = "MALFORMED_SUGGESTION"


class FrontmatterError(CuratorError):
    """A note's YAML frontmatter block cannot be parsed."""

    code = "BAD_FRONTMATTER"


class NoteDecodeError(StoreError):
    """A stored note is not valid UTF-8 text."""

    code = "BAD_ENCODING"
