"""Whole-document persisted state (learning data, filing history).

Each document is loaded and saved as a unit; there is no field-level
update and no concurrency control. Two writers racing on the same
document lose updates (last writer wins), so callers serialize batches.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol

from curator.errors import StoreError

logger = logging.getLogger(__name__)


class StateStorage(Protocol):
    """Load/save capability for one JSON-serializable document."""

    def load(self) -> dict[str, Any] | None:
        """The stored document, or None when nothing was saved yet."""
        ...

    def save(self, data: dict[str, Any]) -> None: ...


class JsonFileStorage:
    """JSON file storage with atomic replace-on-write."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> dict[str, Any] | None:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StoreError(f"Cannot read state file {self.path}: {exc}") from exc
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise StoreError(f"Corrupt state file {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise StoreError(f"Corrupt state file {self.path}: expected a JSON object")
        return data

    def save(self, data: dict[str, Any]) -> None:
        text = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(text)
                os.replace(tmp, self.path)
            except BaseException:
                Path(tmp).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StoreError(f"Cannot write state file {self.path}: {exc}") from exc
        logger.debug("Saved state file %s", self.path)


class MemoryStorage:
    """In-process storage; keeps a JSON round-tripped copy like a file would."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._raw: str | None = json.dumps(data) if data is not None else None

    def load(self) -> dict[str, Any] | None:
        if self._raw is None:
            return None
        data: dict[str, Any] = json.loads(self._raw)
        return data

    def save(self, data: dict[str, Any]) -> None:
        self._raw = json.dumps(data)
