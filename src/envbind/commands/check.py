"""Command: bind a record type against the current environment."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from envbind.commands._base import RECORD_TYPE, EnvbindCommand

if TYPE_CHECKING:
    from envbind.commands._context import AppContext


@click.command(
    cls=EnvbindCommand,
    examples="""\
  envbind check myapp.settings:AppConfig
  PORT=9090 envbind check myapp.settings:AppConfig
  envbind --json check myapp.settings:AppConfig
  envbind -v check myapp.settings:AppConfig""",
)
@click.argument("record_type", type=RECORD_TYPE)
@click.pass_obj
def check(app: AppContext, record_type: type) -> None:
    """Bind RECORD_TYPE from the environment and report the result."""
    from envbind.services.check import CheckService

    app.emit(CheckService().check(record_type))
