"""Note store contract and the in-memory backend.

A store maps case-insensitive vault paths to markdown text. Deletion is
soft: the record keeps its path with a tombstone flag so that a
replicating backend can propagate the delete instead of losing history.
Reads and listings ignore tombstoned notes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from curator.domain.paths import normalize_path, note_key
from curator.errors import NoteNotFoundError


@dataclass(frozen=True)
class NoteRef:
    """Listing entry for a live note."""

    path: str
    mtime: float | None = None
    size: int | None = None


@dataclass(frozen=True)
class StoredNote:
    """A note as read from the store."""

    path: str
    content: str


@runtime_checkable
class NoteStore(Protocol):
    """Minimal contract the curator needs from a vault backend."""

    def list_notes(self) -> list[NoteRef]:
        """All live notes, in backend order."""
        ...

    def read(self, path: str) -> StoredNote | None:
        """The live note at *path*, or None."""
        ...

    def write(self, path: str, content: str) -> None:
        """Create or replace the note at *path* (revives a tombstone)."""
        ...

    def delete(self, path: str) -> None:
        """Soft-delete the note at *path*.

        Raises:
            NoteNotFoundError: If no live note exists at *path*.
        """
        ...


@dataclass
class _Record:
    path: str
    content: str
    deleted: bool = False


class MemoryStore:
    """Dict-backed store for tests and dry experiments.

    Listing order is insertion order of first write.
    """

    def __init__(self, notes: dict[str, str] | None = None) -> None:
        self._records: dict[str, _Record] = {}
        for path, content in (notes or {}).items():
            self.write(path, content)

    def list_notes(self) -> list[NoteRef]:
        return [
            NoteRef(path=r.path, size=len(r.content))
            for r in self._records.values()
            if not r.deleted
        ]

    def read(self, path: str) -> StoredNote | None:
        record = self._records.get(note_key(path))
        if record is None or record.deleted:
            return None
        return StoredNote(path=record.path, content=record.content)

    def write(self, path: str, content: str) -> None:
        key = note_key(path)
        record = self._records.get(key)
        if record is None:
            self._records[key] = _Record(path=normalize_path(path), content=content)
        else:
            record.content = content
            record.deleted = False

    def delete(self, path: str) -> None:
        record = self._records.get(note_key(path))
        if record is None or record.deleted:
            raise NoteNotFoundError(path)
        record.content = ""
        record.deleted = True

    def is_tombstoned(self, path: str) -> bool:
        record = self._records.get(note_key(path))
        return record is not None and record.deleted
