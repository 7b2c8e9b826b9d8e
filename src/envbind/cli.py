"""Root CLI group for envbind with global flags and command registration."""

from __future__ import annotations

import click

from envbind import __version__
from envbind.commands import register_commands
from envbind.commands._context import AppContext
from envbind.config.settings import EnvbindSettings


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="envbind")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-q", "--quiet", is_flag=True, help="Minimal output.")
@click.option("-v", "--verbose", is_flag=True, help="Detailed output with debug logging.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    quiet: bool,
    verbose: bool,
    log_json: bool,
) -> None:
    """envbind: bind environment variables onto typed dataclass records."""
    settings = EnvbindSettings.from_cli(
        json_output=json_output,
        quiet=quiet,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
