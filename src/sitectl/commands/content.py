"""Command group: browse and edit posts, pages and drafts."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from sitectl.commands._base import KIND, SiteGroup
from sitectl.domain.types import DocumentKind
from sitectl.services.content import ContentService

if TYPE_CHECKING:
    from sitectl.commands._context import AppContext


_CONTENT_EXAMPLES = """\
  sitectl content list posts
  sitectl content show post hello-world.md
  sitectl content new draft "Notes on Hugo bundles"
  sitectl content set post hello-world.md rating 5
  sitectl content tag post hello-world.md hugo --index 0
  sitectl content move draft notes-on-hugo-bundles.md post"""


def _service(app: AppContext) -> ContentService:
    return ContentService(app.project, app.repository)


@click.group(cls=SiteGroup, examples=_CONTENT_EXAMPLES)
def content() -> None:
    """Browse, create and edit content documents."""


@content.command("list")
@click.argument("kind", type=KIND)
@click.pass_obj
def list_cmd(app: AppContext, kind: DocumentKind) -> None:
    """List documents of KIND, newest first."""
    app.emit(_service(app).list_documents(kind))


@content.command()
@click.argument("kind", type=KIND)
@click.argument("doc_id")
@click.pass_obj
def show(app: AppContext, kind: DocumentKind, doc_id: str) -> None:
    """Show a document's header and body."""
    app.emit(_service(app).show(kind, doc_id))


@content.command(
    examples="""\
  sitectl content new post "My First Post"
  sitectl content new draft "Привет, мир\""""
)
@click.argument("kind", type=KIND)
@click.argument("title")
@click.pass_obj
def new(app: AppContext, kind: DocumentKind, title: str) -> None:
    """Create a document from TITLE (the slug is derived from it)."""
    app.emit(_service(app).create(kind, title))


@content.command()
@click.argument("kind", type=KIND)
@click.argument("doc_id")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation.")
@click.pass_obj
def delete(app: AppContext, kind: DocumentKind, doc_id: str, yes: bool) -> None:
    """Delete a document's file."""
    if not yes and not app.settings.json_output:
        click.confirm(f"Delete {kind.value} {doc_id}?", abort=True)
    app.emit(_service(app).delete(kind, doc_id))


@content.command(
    "set",
    examples="""\
  sitectl content set post hello.md title "Hello, world"
  sitectl content set post hello.md date 2024-05-01T10:00:00+02:00
  sitectl content set post hello.md tags "hugo, go"
  sitectl content set post hello.md gallery "[/images/a.png, /images/b.png]\"""",
)
@click.argument("kind", type=KIND)
@click.argument("doc_id")
@click.argument("field")
@click.argument("value")
@click.pass_obj
def set_cmd(app: AppContext, kind: DocumentKind, doc_id: str, field: str, value: str) -> None:
    """Set FIELD to VALUE (YAML syntax; typed by the schema when it knows FIELD)."""
    app.emit(_service(app).set_field(kind, doc_id, field, value))


@content.command()
@click.argument("kind", type=KIND)
@click.argument("doc_id")
@click.argument("field")
@click.pass_obj
def unset(app: AppContext, kind: DocumentKind, doc_id: str, field: str) -> None:
    """Remove an optional or custom FIELD."""
    app.emit(_service(app).unset_field(kind, doc_id, field))


@content.command()
@click.argument("kind", type=KIND)
@click.argument("doc_id")
@click.argument("term")
@click.option("--index", type=int, default=None, help="Insert position (default: append).")
@click.option("--category", is_flag=True, help="Edit categories instead of tags.")
@click.pass_obj
def tag(
    app: AppContext,
    kind: DocumentKind,
    doc_id: str,
    term: str,
    index: int | None,
    category: bool,
) -> None:
    """Add a tag (or category) to a document."""
    field = "categories" if category else "tags"
    app.emit(_service(app).add_term(kind, doc_id, term, field=field, index=index))


@content.command()
@click.argument("kind", type=KIND)
@click.argument("doc_id")
@click.argument("index", type=int)
@click.option("--category", is_flag=True, help="Edit categories instead of tags.")
@click.pass_obj
def untag(app: AppContext, kind: DocumentKind, doc_id: str, index: int, category: bool) -> None:
    """Remove the tag (or category) at INDEX (0-based)."""
    field = "categories" if category else "tags"
    app.emit(_service(app).remove_term(kind, doc_id, index, field=field))


@content.command()
@click.argument("kind", type=KIND)
@click.argument("doc_id")
@click.argument("new_slug")
@click.pass_obj
def rename(app: AppContext, kind: DocumentKind, doc_id: str, new_slug: str) -> None:
    """Give a document a new slug."""
    app.emit(_service(app).rename(kind, doc_id, new_slug))


@content.command()
@click.argument("kind", type=KIND)
@click.argument("doc_id")
@click.argument("target", type=KIND)
@click.pass_obj
def move(app: AppContext, kind: DocumentKind, doc_id: str, target: DocumentKind) -> None:
    """Move a document to another kind (e.g. publish a draft)."""
    app.emit(_service(app).move(kind, doc_id, target))
