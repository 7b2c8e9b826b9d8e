"""Command: list the environment bindings declared by a record type."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from envbind.commands._base import RECORD_TYPE, EnvbindCommand

if TYPE_CHECKING:
    from envbind.commands._context import AppContext


@click.command(
    cls=EnvbindCommand,
    examples="""\
  envbind describe myapp.settings:AppConfig
  envbind --json describe myapp.settings:AppConfig""",
)
@click.argument("record_type", type=RECORD_TYPE)
@click.pass_obj
def describe(app: AppContext, record_type: type) -> None:
    """Show each field of RECORD_TYPE with its env name and options."""
    from envbind.services.check import CheckService

    app.emit(CheckService().describe(record_type))
