"""Project context — the explicit handle every repository operation takes.

There is no process-wide "current project". Callers build a
:class:`ProjectContext` once (usually from settings) and pass it down.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from sitectl.domain.types import DocumentKind

if TYPE_CHECKING:
    from sitectl.config.settings import SiteSettings

SCHEMA_DIR = ".sitectl"
SCHEMA_FILENAME = "frontmatter-config.json"


@dataclass(frozen=True)
class ContentLayout:
    """Project-relative directories for each document kind and for assets."""

    posts: str = "content/posts"
    pages: str = "content"
    drafts: str = "content/drafts"
    static: str = "static"
    images: str = "static/images"
    schema_dir: str = SCHEMA_DIR
    schema_filename: str = SCHEMA_FILENAME

    def dir_for(self, kind: DocumentKind) -> str:
        match kind:
            case DocumentKind.POST:
                return self.posts
            case DocumentKind.PAGE:
                return self.pages
            case DocumentKind.DRAFT:
                return self.drafts


@dataclass(frozen=True)
class ProjectContext:
    """A site project on disk: its root directory plus its layout."""

    root: Path
    layout: ContentLayout = field(default_factory=ContentLayout)

    @classmethod
    def from_settings(cls, settings: SiteSettings) -> ProjectContext:
        layout = ContentLayout(
            posts=settings.layout.posts,
            pages=settings.layout.pages,
            drafts=settings.layout.drafts,
            static=settings.layout.static,
            images=settings.layout.images,
            schema_dir=settings.registry.dir,
            schema_filename=settings.registry.filename,
        )
        return cls(root=settings.project_root.resolve(), layout=layout)

    def content_root(self, kind: DocumentKind) -> Path:
        return self.root / self.layout.dir_for(kind)

    def other_content_roots(self, kind: DocumentKind) -> list[Path]:
        """Roots of the other kinds (pages usually contain posts and drafts)."""
        return [self.content_root(k) for k in DocumentKind if k is not kind]

    @property
    def static_root(self) -> Path:
        return self.root / self.layout.static

    @property
    def images_root(self) -> Path:
        return self.root / self.layout.images

    @property
    def schema_path(self) -> Path:
        return self.root / self.layout.schema_dir / self.layout.schema_filename
