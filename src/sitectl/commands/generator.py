"""Command group: run the site generator."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from sitectl.commands._base import SiteGroup
from sitectl.infrastructure.process import DevServer
from sitectl.services.generator import GeneratorService

if TYPE_CHECKING:
    from sitectl.commands._context import AppContext


@click.group(
    cls=SiteGroup,
    examples="""\
  sitectl generator run -- --minify
  sitectl generator run version
  sitectl generator serve""",
)
def generator() -> None:
    """Run the site generator CLI (hugo by default)."""


@generator.command(context_settings={"ignore_unknown_options": True})
@click.argument("args", nargs=-1, type=click.UNPROCESSED)
@click.pass_obj
def run(app: AppContext, args: tuple[str, ...]) -> None:
    """Run the generator with ARGS and print its output."""
    cfg = app.settings.generator
    svc = GeneratorService(
        app.project, app.repository, binary=cfg.binary, timeout=cfg.timeout
    )
    app.emit(svc.run(list(args)))


@generator.command()
@click.pass_obj
def serve(app: AppContext) -> None:
    """Start the generator's dev server until Ctrl-C."""
    cfg = app.settings.generator
    server = DevServer(app.project.root, cfg.binary, cfg.server_args)
    try:
        server.start()
    except FileNotFoundError as exc:
        raise click.ClickException(f"Generator binary not found: {cfg.binary}") from exc

    click.echo(f"Dev server running (pid {server.pid}); press Ctrl-C to stop.", err=True)
    try:
        for line in server.output():
            click.echo(line, nl=False)
    except KeyboardInterrupt:
        click.echo("Stopping dev server...", err=True)
    finally:
        code = server.stop()
        click.echo(f"Dev server stopped (exit {code}).", err=True)
