"""Document and DocumentSummary — one content file in memory."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from sitectl.domain.frontmatter import Frontmatter
from sitectl.domain.types import DocumentKind


@dataclass
class Document:
    """A content file: typed header plus the raw Markdown body.

    ``id`` is the path relative to the kind's content root using forward
    slashes (``hello-world.md``, ``bundle/index.md``). Timestamps come
    from the file system, never from header fields.
    """

    id: str
    path: Path
    kind: DocumentKind
    header: Frontmatter
    body: str = ""
    created_at: datetime | None = None
    modified_at: datetime | None = None
    warnings: list[str] = field(default_factory=list)
    newline: str = "\n"

    @property
    def title(self) -> str:
        return self.header.title

    @property
    def slug(self) -> str:
        """File stem, or the bundle directory name for ``<dir>/index.md``."""
        pure = Path(self.id)
        if pure.name == "index.md" and pure.parent != Path("."):
            return pure.parent.name
        return pure.stem

    def summary(self) -> DocumentSummary:
        return DocumentSummary(
            id=self.id,
            kind=self.kind,
            title=self.header.title,
            date=self.header.date,
            modified_at=self.modified_at,
            tags=list(self.header.tags),
            draft=bool(self.header.draft),
            warnings=list(self.warnings),
        )


@dataclass(frozen=True)
class DocumentSummary:
    """Row in a content listing.

    ``error`` is set when the file could not be decoded; such files are
    still listed so the user can open and fix them.
    """

    id: str
    kind: DocumentKind
    title: str
    date: datetime | None = None
    modified_at: datetime | None = None
    tags: list[str] = field(default_factory=list)
    draft: bool = False
    warnings: list[str] = field(default_factory=list)
    error: str | None = None
