"""Subcommand modules for envbind.

Provides register_commands() which uses deferred imports to keep
``envbind --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from envbind.commands.check import check
    from envbind.commands.describe import describe

    cli.add_command(check)
    cli.add_command(describe)
