"""Click base classes with ``--examples`` support.

``--help`` stays short; ``--examples`` prints worked invocations and
exits.
"""

from __future__ import annotations

from typing import Any

import click

from sitectl.domain.types import DocumentKind


def _add_examples_option(cmd: click.Command | click.Group, examples: str) -> None:
    """Attach an eager ``--examples`` flag to a Click command or group."""

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


class SiteCommand(click.Command):
    """Click Command that supports an ``--examples`` flag."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


class SiteGroup(click.Group):
    """Click Group whose subcommands are :class:`SiteCommand` by default."""

    command_class = SiteCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.examples = examples
        if examples:
            _add_examples_option(self, examples)


class KindType(click.ParamType):
    """Accepts ``post``/``page``/``draft`` and their plurals."""

    name = "kind"

    def convert(
        self, value: Any, param: click.Parameter | None, ctx: click.Context | None
    ) -> DocumentKind:
        if isinstance(value, DocumentKind):
            return value
        text = str(value).strip().lower()
        try:
            return DocumentKind(text.removesuffix("s"))
        except ValueError:
            choices = ", ".join(k.value for k in DocumentKind)
            self.fail(f"{value!r} is not one of {choices}", param, ctx)


KIND = KindType()
