"""Locating the vault and its ``curator.toml``.

The search walks up from the working directory, the way git looks for
``.git/``, and stops at the first directory holding either a
``curator.toml`` or an Obsidian ``.obsidian/`` folder. A config file
above that point belongs to some other tree and is not used.
``CURATOR_CONFIG`` names the file directly and skips the search.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

CONFIG_FILENAME = "curator.toml"
CONFIG_ENV_VAR = "CURATOR_CONFIG"
VAULT_MARKER = ".obsidian"


@dataclass(frozen=True)
class VaultLocation:
    """Where the search stopped.

    ``root`` is the vault directory, or None when neither a config file
    nor a vault marker was found. ``config`` is the TOML file, if any.
    """

    root: Path | None = None
    config: Path | None = None


def locate_vault(start: Path | None = None) -> VaultLocation:
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        config = Path(env_path)
        if config.is_file():
            return VaultLocation(root=config.parent, config=config)
        return VaultLocation()

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        config = directory / CONFIG_FILENAME
        if config.is_file():
            return VaultLocation(root=directory, config=config)
        if (directory / VAULT_MARKER).is_dir():
            return VaultLocation(root=directory)
    return VaultLocation()


def find_config(start: Path | None = None) -> Path | None:
    """The ``curator.toml`` in effect for *start* (default: cwd), if any."""
    return locate_vault(start).config
