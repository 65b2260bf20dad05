"""Entry point: the ``curator`` group, its global flags, and subcommand wiring."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click

from curator import __version__
from curator.commands import register_commands
from curator.commands._context import AppContext
from curator.config.settings import CuratorSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="curator")
@click.option("--json", "json_output", is_flag=True, help="Emit results as JSON.")
@click.option("-q", "--quiet", is_flag=True, help="Print only the key value of a result.")
@click.option("-v", "--verbose", is_flag=True, help="Show details and debug logging.")
@click.option("--log-json", is_flag=True, help="Write logs to stderr as JSON lines.")
@click.option(
    "-c",
    "--config",
    "config_path",
    default=None,
    help="Use this curator.toml instead of searching upward.",
)
@click.option(
    "--vault",
    "vault_root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Vault directory (defaults to the config file's directory).",
)
@click.pass_context
def cli(
    ctx: click.Context, config_path: str | None, vault_root: Path | None, **flags: Any
) -> None:
    """curator — file, undo, and learn for a markdown vault inbox."""
    app = AppContext(
        CuratorSettings.from_cli(config_path=config_path, vault_root=vault_root, **flags)
    )
    ctx.obj = app
    ctx.call_on_close(app.close)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
