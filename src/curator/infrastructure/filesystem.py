"""Filesystem-backed note store for a local markdown vault.

INVARIANT: Files are truth. The vault directory is authoritative; the
curator keeps no index of it.

Paths are matched case-insensitively against the directory tree so the
store behaves the same on case-sensitive and case-insensitive
filesystems. Soft delete moves the file under ``.trash/`` (the Obsidian
convention) rather than unlinking it.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from curator.domain.paths import normalize_path
from curator.errors import NoteDecodeError, NoteNotFoundError, StoreError
from curator.infrastructure.store import NoteRef, StoredNote

logger = logging.getLogger(__name__)

TRASH_DIR = ".trash"

# Directories to skip when discovering notes.
_SKIP_DIRS = frozenset({TRASH_DIR, ".obsidian", ".git", ".curator"})
_NOTE_SUFFIXES = frozenset({".md"})


class FilesystemStore:
    """Store notes as files under *root*."""

    def __init__(self, root: Path) -> None:
        self.root = root

    # ------------------------------------------------------------------
    # NoteStore contract
    # ------------------------------------------------------------------

    def list_notes(self) -> list[NoteRef]:
        if not self.root.exists():
            return []
        results: list[NoteRef] = []
        try:
            for path in sorted(self.root.rglob("*")):
                if not path.is_file() or path.suffix.lower() not in _NOTE_SUFFIXES:
                    continue
                rel = path.relative_to(self.root)
                if any(part in _SKIP_DIRS for part in rel.parts):
                    continue
                stat = path.stat()
                results.append(NoteRef(path=rel.as_posix(), mtime=stat.st_mtime, size=stat.st_size))
        except OSError as exc:
            raise StoreError(f"Cannot list vault {self.root}: {exc}") from exc
        return results

    def read(self, path: str) -> StoredNote | None:
        resolved = self._find(path)
        if resolved is None or not resolved.is_file():
            return None
        try:
            # newline="" keeps CRLF notes byte-identical through a move and undo.
            with resolved.open(encoding="utf-8", newline="") as fh:
                content = fh.read()
        except UnicodeDecodeError as exc:
            raise NoteDecodeError(f"Cannot decode {path} as UTF-8: {exc}") from exc
        except OSError as exc:
            raise StoreError(f"Cannot read {path}: {exc}") from exc
        return StoredNote(path=resolved.relative_to(self.root).as_posix(), content=content)

    def write(self, path: str, content: str) -> None:
        target = self._find(path) or self._resolve_new(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8", newline="")
        except OSError as exc:
            raise StoreError(f"Cannot write {path}: {exc}") from exc

    def delete(self, path: str) -> None:
        resolved = self._find(path)
        if resolved is None or not resolved.is_file():
            raise NoteNotFoundError(path)
        trash = self.root / TRASH_DIR / resolved.relative_to(self.root)
        try:
            trash.parent.mkdir(parents=True, exist_ok=True)
            if trash.exists():
                trash.unlink()
            shutil.move(str(resolved), str(trash))
        except OSError as exc:
            raise StoreError(f"Cannot delete {path}: {exc}") from exc
        logger.debug("Moved %s to trash", path)

    # ------------------------------------------------------------------
    # Path resolution
    # ------------------------------------------------------------------

    def _find(self, path: str) -> Path | None:
        """Locate an existing file for *path*, ignoring case per segment."""
        parts = normalize_path(path).split("/")
        current = self.root
        for part in parts:
            if not part or part == "..":
                return None
            exact = current / part
            if exact.exists():
                current = exact
                continue
            if not current.is_dir():
                return None
            folded = part.casefold()
            match = next((c for c in current.iterdir() if c.name.casefold() == folded), None)
            if match is None:
                return None
            current = match
        return current

    def _resolve_new(self, path: str) -> Path:
        """Path for a new file, reusing existing folders regardless of case."""
        normalized = normalize_path(path)
        if not normalized:
            raise StoreError(f"Invalid note path: {path!r}")
        folder, _, name = normalized.rpartition("/")
        parent = self._find(folder) if folder else self.root
        if parent is None:
            parent = self.root / folder
        result = parent / name

        root_resolved = self.root.resolve()
        if not result.resolve().is_relative_to(root_resolved):
            msg = f"Path escapes vault root: {path}"
            raise StoreError(msg)
        return result
