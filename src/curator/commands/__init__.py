"""Subcommand modules for curator.

Provides register_commands() which uses deferred imports to keep
``curator --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the ``learn`` group and the standalone commands on the root group."""
    # --- Groups ---
    from curator.commands.learn import learn

    cli.add_command(learn)

    # --- Standalone commands ---
    from curator.commands.capture import capture
    from curator.commands.file import file_cmd
    from curator.commands.history import history
    from curator.commands.undo import undo

    cli.add_command(capture)
    cli.add_command(file_cmd)
    cli.add_command(undo)
    cli.add_command(history)
