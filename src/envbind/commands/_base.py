"""Custom Click base classes and parameter types.

EnvbindCommand accepts an ``examples`` parameter; when ``--examples`` is
passed, the command prints usage examples and exits. RecordTypeParam
resolves a ``module:Class`` reference to a dataclass type.
"""

from __future__ import annotations

import dataclasses
import importlib
from typing import Any

import click


def _add_examples_option(cmd: click.Command, examples: str) -> None:
    """Attach an eager ``--examples`` flag to a Click command."""

    def show_examples(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        click.echo(examples)
        ctx.exit(0)

    cmd.params.append(
        click.Option(
            ["--examples"],
            is_flag=True,
            expose_value=False,
            is_eager=True,
            callback=show_examples,
            help="Show usage examples.",
        )
    )


class EnvbindCommand(click.Command):
    """Click Command subclass that supports an ``--examples`` flag."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


class RecordTypeParam(click.ParamType):
    """A ``package.module:ClassName`` reference to a dataclass record type."""

    name = "MODULE:CLASS"

    def convert(self, value: Any, param: click.Parameter | None, ctx: click.Context | None) -> type:
        if isinstance(value, type):
            return value

        module_name, sep, attr_path = str(value).partition(":")
        if not sep or not module_name or not attr_path:
            self.fail(f"expected MODULE:CLASS, got {value!r}", param, ctx)

        try:
            obj: Any = importlib.import_module(module_name)
        except ImportError as exc:
            self.fail(f"cannot import module {module_name!r}: {exc}", param, ctx)

        for attr in attr_path.split("."):
            try:
                obj = getattr(obj, attr)
            except AttributeError:
                self.fail(f"{module_name!r} has no attribute {attr_path!r}", param, ctx)

        if not (isinstance(obj, type) and dataclasses.is_dataclass(obj)):
            self.fail(f"{value!r} is not a dataclass type", param, ctx)
        return obj


RECORD_TYPE = RecordTypeParam()
