"""Subcommand modules for sitectl.

register_commands() imports each group only when the CLI is assembled.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups on the root CLI group."""
    from sitectl.commands.content import content
    from sitectl.commands.generator import generator
    from sitectl.commands.images import images
    from sitectl.commands.schema import schema

    cli.add_command(content)
    cli.add_command(schema)
    cli.add_command(images)
    cli.add_command(generator)
