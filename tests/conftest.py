"""Shared pytest fixtures and test helpers for curator tests."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner

from curator.config.settings import CuratorSettings
from curator.domain.content import render_frontmatter
from curator.infrastructure.state import MemoryStorage
from curator.infrastructure.store import MemoryStore
from curator.infrastructure.workspace import Workspace


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's CURATOR_* environment out of the tests."""
    monkeypatch.delenv("CURATOR_CONFIG", raising=False)
    monkeypatch.delenv("CURATOR_VAULT_ROOT", raising=False)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def vault_root(tmp_path: Path) -> Path:
    """Temporary vault directory with an empty inbox.

    This is the single source of truth for the vault directory layout.
    All vault-related fixtures (settings, _isolated_vault) build on this.
    """
    (tmp_path / "inbox").mkdir()
    return tmp_path


@pytest.fixture
def settings(vault_root: Path) -> CuratorSettings:
    return CuratorSettings.from_cli(vault_root=vault_root)


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def workspace(settings: CuratorSettings, store: MemoryStore) -> Workspace:
    """Workspace over an in-memory store and in-memory state documents."""
    return Workspace(
        settings,
        store=store,
        learning_storage=MemoryStorage(),
        history_storage=MemoryStorage(),
    )


@pytest.fixture
def _isolated_vault(vault_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp vault root so the CLI works on an isolated vault.

    Use via ``@pytest.mark.usefixtures("_isolated_vault")`` on command test
    classes. Tests that need the path can also request ``vault_root``.
    """
    monkeypatch.chdir(vault_root)


# ---------------------------------------------------------------------------
# Shared test helpers (used across service and command test modules)
# ---------------------------------------------------------------------------


def analyzed_note(
    *,
    folder: str | None = "projects",
    confidence: Any = "high",
    tags: Iterable[str] = ("python",),
    related: Iterable[str] = (),
    body: str = "Some note body.\n",
    **extra: Any,
) -> str:
    """Markdown for an inbox note that already carries an ``ai_suggestions`` block."""
    suggestion: dict[str, Any] = {
        "folder": folder,
        "tags": list(tags),
        "related": list(related),
        "summary": "A short summary",
        "confidence": confidence,
    }
    frontmatter: dict[str, Any] = {"source": "test", **extra, "ai_suggestions": suggestion}
    return render_frontmatter(frontmatter, body)


def settings_with(base: CuratorSettings, **sections: dict[str, Any]) -> CuratorSettings:
    """Copy *base* with some section fields overridden.

    ``settings_with(s, filer={"min_confidence": 0.5})``
    """
    updates = {
        name: getattr(base, name).model_copy(update=fields) for name, fields in sections.items()
    }
    return base.model_copy(update=updates)
