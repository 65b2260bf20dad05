"""Workspace — the single dependency injected into every service.

Bundles the settings, the note store, and the two persisted state
documents (learning data and filing history). Production code builds
the backends from settings; tests inject in-memory fakes.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from curator.infrastructure.filesystem import FilesystemStore
from curator.infrastructure.livesync import LiveSyncStore
from curator.infrastructure.state import JsonFileStorage

if TYPE_CHECKING:
    from curator.config.settings import CuratorSettings
    from curator.infrastructure.state import StateStorage
    from curator.infrastructure.store import NoteStore

logger = logging.getLogger(__name__)


class Workspace:
    """Settings plus the store and state backends they select."""

    def __init__(
        self,
        settings: CuratorSettings,
        *,
        store: NoteStore | None = None,
        learning_storage: StateStorage | None = None,
        history_storage: StateStorage | None = None,
    ) -> None:
        self.settings = settings
        self.store: NoteStore = store if store is not None else _build_store(settings)
        self.learning_storage: StateStorage = (
            learning_storage
            if learning_storage is not None
            else JsonFileStorage(settings.state_path(settings.learning.state_file))
        )
        self.history_storage: StateStorage = (
            history_storage
            if history_storage is not None
            else JsonFileStorage(settings.state_path(settings.history.state_file))
        )

    def close(self) -> None:
        close = getattr(self.store, "close", None)
        if callable(close):
            close()


def _build_store(settings: CuratorSettings) -> NoteStore:
    if settings.vault.backend == "livesync":
        cfg = settings.livesync
        logger.debug("Using LiveSync store at %s/%s", cfg.url, cfg.database)
        return LiveSyncStore(
            cfg.url,
            cfg.database,
            username=cfg.username,
            password=cfg.password,
            chunk_size=cfg.chunk_size,
            timeout=cfg.timeout,
        )
    return FilesystemStore(settings.vault_root)
