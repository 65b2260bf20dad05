"""Command: file analyzed inbox notes into their folders."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from curator.commands._base import CuratorCommand

if TYPE_CHECKING:
    from curator.commands._context import AppContext


@click.command(
    "file",
    cls=CuratorCommand,
    examples="""\
  curator file                          # file up to 10 notes
  curator file --dry-run                # preview targets, write nothing
  curator file --limit 25 --confidence 0.5
  curator file --session filer-1718000000000-a1b2c3d4
  curator --json file --dry-run""",
)
@click.option(
    "--limit",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum notes to process (default from [filer] default_limit).",
)
@click.option(
    "--confidence",
    "min_confidence",
    type=click.FloatRange(0.0, 1.0),
    default=None,
    help="Minimum confidence to file; lower goes to the review queue.",
)
@click.option("--dry-run", is_flag=True, help="Show where notes would go without moving them.")
@click.option("--session", "session_id", default=None, help="Record moves under this session id.")
@click.pass_obj
def file_cmd(
    app: AppContext,
    limit: int | None,
    min_confidence: float | None,
    dry_run: bool,
    session_id: str | None,
) -> None:
    """File inbox notes that carry AI suggestions."""
    from curator.services.filing import FilingService

    max_limit = app.settings.filer.max_limit
    if limit is not None and limit > max_limit:
        raise click.BadParameter(f"must be at most {max_limit}", param_hint="'--limit'")

    app.emit(
        FilingService(app.workspace).file_batch(
            limit=limit,
            min_confidence=min_confidence,
            dry_run=dry_run,
            session_id=session_id,
        )
    )
