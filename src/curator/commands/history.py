"""Command: list filing sessions that can still be undone."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from curator.commands._base import CuratorCommand

if TYPE_CHECKING:
    from curator.commands._context import AppContext


@click.command(
    cls=CuratorCommand,
    examples="""\
  curator history
  curator history --limit 3
  curator history --session filer-1718000000000-a1b2c3d4
  curator -q history             # session ids only""",
)
@click.option("--limit", type=click.IntRange(min=1), default=10, show_default=True)
@click.option("--session", "session_id", default=None, help="Show one session's operations.")
@click.pass_obj
def history(app: AppContext, limit: int, session_id: str | None) -> None:
    """Show recent undoable filing sessions."""
    from curator.services.history import HistoryService

    svc = HistoryService(app.workspace)
    if session_id is not None:
        app.emit(svc.get_session(session_id))
    else:
        app.emit(svc.recent_sessions(limit=limit))
