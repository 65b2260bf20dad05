"""Vault path helpers.

Paths are forward-slash strings relative to the vault root. Folders are
not first-class: a folder is just the prefix of the notes inside it.
Path identity is case-insensitive.
"""

from __future__ import annotations

import posixpath


def normalize_path(path: str) -> str:
    """Strip whitespace and leading/trailing slashes, collapse separators."""
    cleaned = path.strip().replace("\\", "/")
    parts = [p for p in cleaned.split("/") if p and p != "."]
    return "/".join(parts)


def note_key(path: str) -> str:
    """Case-insensitive identity key for a note path."""
    return normalize_path(path).lower()


def folder_of(path: str) -> str:
    """Folder portion of a note path (``""`` for the vault root)."""
    return posixpath.dirname(normalize_path(path))


def basename(path: str) -> str:
    return posixpath.basename(normalize_path(path))


def join(folder: str, name: str) -> str:
    folder = normalize_path(folder)
    return f"{folder}/{name}" if folder else name


def is_within(path: str, folder: str) -> bool:
    """True if *path* lives in *folder* or any of its subfolders."""
    key = note_key(path)
    prefix = note_key(folder)
    if not prefix:
        return True
    return key.startswith(prefix + "/")
