"""Command group: the custom-field schema."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from sitectl.commands._base import SiteGroup
from sitectl.services.schema import SchemaService

if TYPE_CHECKING:
    from sitectl.commands._context import AppContext


def _service(app: AppContext) -> SchemaService:
    return SchemaService(
        app.project,
        app.repository,
        long_text_threshold=app.settings.inference.long_text_threshold,
    )


@click.group(
    cls=SiteGroup,
    examples="""\
  sitectl schema show
  sitectl schema infer
  sitectl schema infer --write
  sitectl --json schema editors""",
)
def schema() -> None:
    """Inspect, infer and write the custom-field schema."""


@schema.command()
@click.pass_obj
def show(app: AppContext) -> None:
    """Show the project's schema config."""
    app.emit(_service(app).show())


@schema.command()
@click.option("--write", is_flag=True, help="Save the inferred schema to the project.")
@click.pass_obj
def infer(app: AppContext, write: bool) -> None:
    """Infer a schema from the custom fields of every document."""
    app.emit(_service(app).infer(write=write))


@schema.command()
@click.pass_obj
def editors(app: AppContext) -> None:
    """Show which editor widget each field type uses."""
    app.emit(_service(app).editors())
