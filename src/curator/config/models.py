"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, curator.toml only contains
overrides. A local vault needs no config file at all; a LiveSync vault
needs only the [livesync] connection details.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

# --- curator.toml sections ---


class VaultConfig(BaseModel):
    """[vault] section."""

    model_config = {"frozen": True}

    backend: Literal["filesystem", "livesync"] = "filesystem"
    inbox_path: str = "inbox"
    review_queue_path: str = "inbox/review-queue"
    sanitize_unicode: bool = True


class LiveSyncConfig(BaseModel):
    """[livesync] section."""

    model_config = {"frozen": True}

    url: str = "http://127.0.0.1:5984"
    database: str = "obsidian"
    username: str | None = None
    password: str | None = None
    chunk_size: int = Field(default=50_000, gt=0)
    timeout: float = 30.0


class FilerConfig(BaseModel):
    """[filer] section."""

    model_config = {"frozen": True}

    default_limit: int = Field(default=10, ge=1)
    max_limit: int = Field(default=100, ge=1)
    min_confidence: float = Field(default=0.7, ge=0.0, le=1.0)
    max_collision_attempts: int = Field(default=100, ge=1)
    filed_by: str = "vault-curator"
    enable_learning: bool = True


class HistoryConfig(BaseModel):
    """[history] section."""

    model_config = {"frozen": True}

    max_sessions: int = Field(default=100, ge=1)
    state_file: str = ".curator/filing-history.json"


class LearningConfig(BaseModel):
    """[learning] section."""

    model_config = {"frozen": True}

    max_corrections: int = Field(default=1000, ge=1)
    max_keywords: int = Field(default=20, ge=1)
    stored_keywords: int = Field(default=10, ge=0)
    state_file: str = ".curator/learning-data.json"
