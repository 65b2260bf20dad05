"""AppContext — the object every subcommand receives via ``@click.pass_obj``.

It owns the settings, opens the workspace on demand, and turns a
ServiceResult into output and an exit status.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from curator.config.logging import configure_logging
from curator.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from curator.config.settings import CuratorSettings
    from curator.infrastructure.workspace import Workspace
    from curator.services.result import ServiceResult


class AppContext:
    """Per-invocation state shared by all curator commands.

    Nothing touches the vault until :attr:`workspace` is read, so
    ``--help``, ``--version`` and ``--examples`` never reach the store.
    """

    def __init__(self, settings: CuratorSettings) -> None:
        self.settings = settings
        self.output = OutputSettings(
            json_output=settings.json_output,
            quiet=settings.quiet,
            verbose=settings.verbose,
        )
        self._workspace: Workspace | None = None
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def workspace(self) -> Workspace:
        if self._workspace is None:
            from curator.infrastructure.workspace import Workspace

            self._workspace = Workspace(self.settings)
        return self._workspace

    def close(self) -> None:
        """Release the store connection, if one was opened."""
        workspace, self._workspace = self._workspace, None
        if workspace is not None:
            workspace.close()

    def emit(self, result: ServiceResult) -> None:
        """Print *result* and exit 1 if it failed.

        A successful result goes to stdout. Its warnings go to stderr,
        except in JSON mode where they are part of the payload. A failed
        result goes to stderr.
        """
        text = format_result(result, settings=self.output)
        if not result.ok:
            click.echo(text, err=True)
            raise SystemExit(1)

        click.echo(text)
        if not self.output.json_output:
            for warning in result.warnings:
                click.echo(f"WARNING: {warning}", err=True)
