"""Command group: teach the filer from manual corrections."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from curator.commands._base import CuratorGroup

if TYPE_CHECKING:
    from curator.commands._context import AppContext

_LEARN_EXAMPLES = """\
  curator learn correct inbox/idea.md projects/garden/idea.md
  curator learn hints inbox/2024-06-01-120000-new-tomato-varieties.md
  curator learn stats
  curator learn reset --yes"""


@click.group(cls=CuratorGroup, examples=_LEARN_EXAMPLES)
@click.pass_obj
def learn(app: AppContext) -> None:
    """Record corrections and inspect learned folder preferences."""


@learn.command(
    examples="""\
  curator learn correct inbox/idea.md projects/garden/idea.md
  curator learn correct resources/recipe.md cooking/recipe.md"""
)
@click.argument("original")
@click.argument("corrected")
@click.pass_obj
def correct(app: AppContext, original: str, corrected: str) -> None:
    """Record that a note filed at ORIGINAL belongs at CORRECTED."""
    from curator.services.learning import LearningService

    app.emit(LearningService(app.workspace).record_move(original, corrected))


@learn.command(
    examples="""\
  curator learn hints inbox/new-idea.md
  curator -v learn hints inbox/new-idea.md      # show every folder score"""
)
@click.argument("path")
@click.pass_obj
def hints(app: AppContext, path: str) -> None:
    """Show which folder the learner would pick for the note at PATH."""
    from curator.services.learning import LearningService

    app.emit(LearningService(app.workspace).hints_for_note(path))


@learn.command(
    examples="""\
  curator learn stats
  curator --json learn stats"""
)
@click.pass_obj
def stats(app: AppContext) -> None:
    """Show how many corrections and folders have been learned."""
    from curator.services.learning import LearningService

    app.emit(LearningService(app.workspace).stats())


@learn.command(
    examples="""\
  curator learn reset
  curator learn reset --yes"""
)
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt.")
@click.pass_obj
def reset(app: AppContext, yes: bool) -> None:
    """Forget every recorded correction."""
    from curator.services.learning import LearningService

    if not yes and not click.confirm("Forget all learned folder preferences?"):
        click.echo("Cancelled.")
        return
    app.emit(LearningService(app.workspace).reset())
