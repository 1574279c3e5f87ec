"""Command group: the image library under static/images."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from sitectl.commands._base import SiteGroup
from sitectl.services.assets import AssetService

if TYPE_CHECKING:
    from sitectl.commands._context import AppContext


@click.group(
    cls=SiteGroup,
    examples="""\
  sitectl images list
  sitectl images add ~/Pictures/cover.png
  sitectl images remove /images/cover.png""",
)
def images() -> None:
    """List, add and remove project images."""


@images.command("list")
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List images, newest first."""
    app.emit(AssetService(app.project).list_images())


@images.command()
@click.argument("source", type=click.Path(path_type=Path))
@click.pass_obj
def add(app: AppContext, source: Path) -> None:
    """Copy SOURCE into the images directory and print its URL."""
    app.emit(AssetService(app.project).add_image(source))


@images.command()
@click.argument("image")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation.")
@click.pass_obj
def remove(app: AppContext, image: str, yes: bool) -> None:
    """Delete IMAGE (a path under the images directory or its /images/ URL)."""
    if not yes and not app.settings.json_output:
        click.confirm(f"Delete image {image}?", abort=True)
    app.emit(AssetService(app.project).remove_image(image))
