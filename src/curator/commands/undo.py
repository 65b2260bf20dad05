"""Command: reverse a filing session."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from curator.commands._base import CuratorCommand

if TYPE_CHECKING:
    from curator.commands._context import AppContext


@click.command(
    cls=CuratorCommand,
    examples="""\
  curator undo                                   # most recent session
  curator undo filer-1718000000000-a1b2c3d4
  curator -v undo                                # list every restored note""",
)
@click.argument("session_id", required=False, default=None)
@click.pass_obj
def undo(app: AppContext, session_id: str | None) -> None:
    """Move every note of a filing session back to where it was."""
    from curator.services.history import HistoryService

    app.emit(HistoryService(app.workspace).undo_session(session_id))
