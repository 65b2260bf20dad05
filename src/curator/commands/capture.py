"""Command: capture text into the inbox."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from curator.commands._base import CuratorCommand

if TYPE_CHECKING:
    from curator.commands._context import AppContext


@click.command(
    cls=CuratorCommand,
    examples="""\
  curator capture "Look into CouchDB compaction schedules"
  curator --json capture "Idea: weekly review template"
  curator capture "Call the dentist" --source telegram""",
)
@click.argument("text", nargs=-1, required=True)
@click.option("--source", default="cli", show_default=True, help="Where the text came from.")
@click.pass_obj
def capture(app: AppContext, text: tuple[str, ...], source: str) -> None:
    """Write TEXT to the inbox as a new note."""
    from curator.services.capture import CaptureService

    app.emit(CaptureService(app.workspace).capture(" ".join(text), source=source))
