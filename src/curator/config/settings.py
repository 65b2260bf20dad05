"""CuratorSettings — one frozen object for CLI flags, env vars and ``curator.toml``.

Later sources lose to earlier ones:

  1. CLI flags    — keyword arguments from the root Click group
  2. Env vars     — ``CURATOR_*``, with ``__`` between section and key
                    (``CURATOR_FILER__MIN_CONFIDENCE=0.5``)
  3. TOML file    — ``curator.toml``, found by walking up from the vault
  4. Defaults     — the section models in :mod:`curator.config.models`

``vault_root`` is not configured directly: it is the directory holding
the TOML file, else the nearest Obsidian vault above the working
directory, else the working directory itself.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from curator.config.discovery import locate_vault
from curator.config.models import (
    FilerConfig,
    HistoryConfig,
    LearningConfig,
    LiveSyncConfig,
    VaultConfig,
)


def read_toml(path: Path) -> dict[str, Any]:
    """Parse *path*; a syntax error is reported as a CLI usage failure."""
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise click.ClickException(f"Invalid TOML in {path}: {exc}") from exc


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Feeds the sections of an already parsed ``curator.toml`` to pydantic."""

    def __init__(self, settings_cls: type[BaseSettings], data: dict[str, Any]) -> None:
        super().__init__(settings_cls)
        self._data = data

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# pydantic-settings builds its sources inside ``__init__``; the parsed
# TOML for the settings object under construction is parked here.
_pending = threading.local()


class CuratorSettings(BaseSettings):
    """Settings for the curator CLI and services.

    Attributes:
        vault_root: Local vault directory. State files live beneath it.
        config_path: The TOML file in effect, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "CURATOR_",
        "env_nested_delimiter": "__",
    }

    vault_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # Output flags from the root group.
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    vault: VaultConfig = Field(default_factory=VaultConfig)
    livesync: LiveSyncConfig = Field(default_factory=LiveSyncConfig)
    filer: FilerConfig = Field(default_factory=FilerConfig)
    history: HistoryConfig = Field(default_factory=HistoryConfig)
    learning: LearningConfig = Field(default_factory=LearningConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        toml_data = getattr(_pending, "toml_data", None) or {}
        return init_settings, env_settings, TomlSettingsSource(settings_cls, toml_data)

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        vault_root: Path | None = None,
        **cli_flags: Any,
    ) -> CuratorSettings:
        """Build settings for one CLI invocation.

        An explicit *config_path* that does not exist is ignored rather
        than rejected, so ``-c`` can point at a file not yet written.
        """
        marker_root: Path | None = None
        if config_path:
            candidate = Path(config_path)
            toml_path = candidate if candidate.is_file() else None
        else:
            location = locate_vault(vault_root)
            toml_path, marker_root = location.config, location.root

        if vault_root is None:
            vault_root = toml_path.parent if toml_path else marker_root or Path.cwd()

        _pending.toml_data = read_toml(toml_path) if toml_path else {}
        try:
            return cls(vault_root=vault_root, config_path=toml_path, **cli_flags)
        finally:
            _pending.toml_data = None

    def state_path(self, relative: str) -> Path:
        """Resolve a state file setting against the vault root."""
        path = Path(relative)
        return path if path.is_absolute() else self.vault_root / path
