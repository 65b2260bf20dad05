"""Click command classes that carry usage examples.

``--help`` stays short; the worked invocations live behind an eager
``--examples`` flag so they print even when required arguments are
missing.
"""

from __future__ import annotations

from typing import Any

import click


class ExamplesMixin:
    """Adds ``examples=`` to a Click command class.

    Must come before the Click base in the MRO so the keyword is consumed
    before ``click.Command.__init__`` sees it.
    """

    params: list[click.Parameter]

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._print_examples,
                    help="Show usage examples.",
                )
            )

    def _print_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if value:
            click.echo(f"Examples for '{ctx.command_path}':\n\n{self.examples}")
            ctx.exit(0)


class CuratorCommand(ExamplesMixin, click.Command):
    """A leaf command such as ``curator file``."""


class CuratorGroup(ExamplesMixin, click.Group):
    """A command group; ``@group.command()`` builds :class:`CuratorCommand`."""

    command_class = CuratorCommand
