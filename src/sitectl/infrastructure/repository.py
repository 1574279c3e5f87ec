"""Content repository — maps (kind, id) to Markdown files and back.

The repository exclusively owns the id-to-path mapping. Documents it
hands out are plain in-memory values; callers mutate them and give them
back to :meth:`ContentRepository.save`.
"""

from __future__ import annotations

import builtins
import logging
import os
import shutil
from datetime import datetime
from pathlib import Path

from sitectl.domain.codec import decode, detect_newline, encode
from sitectl.domain.document import Document, DocumentSummary
from sitectl.domain.errors import DuplicateSlugError, MalformedHeaderError, NotFoundError
from sitectl.domain.frontmatter import Frontmatter
from sitectl.domain.schema import SchemaRegistry
from sitectl.domain.slugs import derive_title, slugify
from sitectl.domain.types import DocumentKind
from sitectl.infrastructure.filesystem import (
    BUNDLE_INDEX,
    atomic_write,
    doc_id_for,
    find_documents,
    read_text,
    resolve_doc_path,
    slug_taken,
)
from sitectl.infrastructure.project import ProjectContext
from sitectl.infrastructure.schema_store import load_registry_or_default

logger = logging.getLogger(__name__)


def _file_times(path: Path) -> tuple[datetime, datetime]:
    st = path.stat()
    created = getattr(st, "st_birthtime", None) or st.st_ctime
    return (
        datetime.fromtimestamp(created).astimezone(),
        datetime.fromtimestamp(st.st_mtime).astimezone(),
    )


class ContentRepository:
    """Read and write the documents of one project.

    Args:
        project: The project to operate on.
        registry: Schema used to coerce custom fields. Loaded lazily from
            the project's schema config when omitted.
    """

    def __init__(self, project: ProjectContext, registry: SchemaRegistry | None = None) -> None:
        self.project = project
        self._registry = registry

    @property
    def registry(self) -> SchemaRegistry:
        if self._registry is None:
            self._registry = load_registry_or_default(self.project.schema_path)
        return self._registry

    @registry.setter
    def registry(self, value: SchemaRegistry) -> None:
        self._registry = value

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def _load(self, kind: DocumentKind, path: Path) -> Document:
        doc_id = doc_id_for(self.project.content_root(kind), path)
        raw = read_text(path)
        header_map, body = decode(raw)
        created_at, modified_at = _file_times(path)

        header = Frontmatter.parse(header_map, self.registry, kind)
        warnings = list(header.warnings)
        if header_map is None:
            warnings.insert(0, "No frontmatter found; using defaults")
        if not header.title:
            header.title = derive_title(body, doc_id)
        if header.date is None:
            header.date = modified_at.replace(microsecond=0)

        return Document(
            id=doc_id,
            path=path,
            kind=kind,
            header=header,
            body=body,
            created_at=created_at,
            modified_at=modified_at,
            warnings=warnings,
            newline=detect_newline(raw),
        )

    def get(self, kind: DocumentKind, doc_id: str) -> Document:
        """Load one document.

        Raises:
            InvalidIdError: If *doc_id* is malformed or escapes the content root.
            NotFoundError: If no such file exists.
            MalformedHeaderError: If the header cannot be decoded.
        """
        path = resolve_doc_path(self.project, kind, doc_id)
        if not path.is_file():
            msg = f"No {kind.value} with id {doc_id!r}"
            raise NotFoundError(msg)
        return self._load(kind, path)

    def list(self, kind: DocumentKind) -> builtins.list[DocumentSummary]:
        """Summaries of every document of *kind*, newest modification first.

        A file whose header cannot be decoded is still listed, with the
        decode error on :attr:`DocumentSummary.error`.
        """
        root = self.project.content_root(kind)
        summaries: list[DocumentSummary] = []
        for path in find_documents(self.project, kind):
            try:
                summaries.append(self._load(kind, path).summary())
            except (MalformedHeaderError, UnicodeDecodeError) as exc:
                doc_id = doc_id_for(root, path)
                logger.warning("Cannot decode %s: %s", path, exc)
                summaries.append(
                    DocumentSummary(
                        id=doc_id,
                        kind=kind,
                        title=derive_title("", doc_id),
                        modified_at=_file_times(path)[1],
                        error=str(exc),
                    )
                )
        summaries.sort(key=lambda s: s.modified_at.timestamp() if s.modified_at else 0.0, reverse=True)
        return summaries

    def list_all(self, skipped: builtins.list[str] | None = None) -> builtins.list[Document]:
        """Every decodable document of every kind.

        Undecodable files are logged and, when *skipped* is given, their
        errors are appended to it.
        """
        documents: list[Document] = []
        for kind in DocumentKind:
            root = self.project.content_root(kind)
            for path in find_documents(self.project, kind):
                try:
                    documents.append(self._load(kind, path))
                except (MalformedHeaderError, UnicodeDecodeError) as exc:
                    logger.warning("Skipping %s: %s", path, exc)
                    if skipped is not None:
                        skipped.append(f"{kind.value}:{doc_id_for(root, path)}: {exc}")
        return documents

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------

    def save(self, document: Document) -> None:
        """Encode *document* and replace its file atomically."""
        block = document.header.to_header_block()
        text = encode(block, document.body, newline=document.newline)
        atomic_write(document.path, text)
        document.header.mark_saved(block)
        document.created_at, document.modified_at = _file_times(document.path)
        logger.info("Saved %s %s", document.kind.value, document.id)

    def create(self, kind: DocumentKind, title: str, body: str = "") -> Document:
        """Create a new document from *title*.

        Raises:
            DuplicateSlugError: If ``<slug>.md`` or ``<slug>/index.md`` exists.
        """
        slug = slugify(title)
        root = self.project.content_root(kind)
        if slug_taken(root, slug):
            msg = f"A {kind.value} with slug {slug!r} already exists"
            raise DuplicateSlugError(msg)

        doc_id = f"{slug}.md"
        document = Document(
            id=doc_id,
            path=resolve_doc_path(self.project, kind, doc_id),
            kind=kind,
            header=Frontmatter.new(title.strip() or slug, kind=kind),
            body=body,
        )
        self.save(document)
        return document

    def delete(self, kind: DocumentKind, doc_id: str) -> Path:
        """Remove the file behind *doc_id* and return its path.

        Raises:
            NotFoundError: If the file does not exist.
        """
        path = resolve_doc_path(self.project, kind, doc_id)
        if not path.is_file():
            msg = f"No {kind.value} with id {doc_id!r}"
            raise NotFoundError(msg)
        path.unlink()
        logger.info("Deleted %s %s", kind.value, doc_id)
        return path

    def _relocate(self, document: Document, target_kind: DocumentKind, slug: str) -> Path:
        """Move the file (or whole bundle directory) to ``<target root>/<slug>``."""
        target_root = self.project.content_root(target_kind)
        if slug_taken(target_root, slug):
            msg = f"A {target_kind.value} with slug {slug!r} already exists"
            raise DuplicateSlugError(msg)
        target_root.mkdir(parents=True, exist_ok=True)

        if document.path.name == BUNDLE_INDEX and document.path.parent != self.project.content_root(
            document.kind
        ):
            target_dir = target_root / slug
            shutil.move(document.path.parent, target_dir)
            return target_dir / BUNDLE_INDEX

        target = target_root / f"{slug}{document.path.suffix}"
        os.replace(document.path, target)
        return target

    def rename(self, kind: DocumentKind, doc_id: str, new_slug: str) -> Document:
        """Give a document a new slug within its kind.

        Raises:
            NotFoundError, InvalidIdError, DuplicateSlugError
        """
        document = self.get(kind, doc_id)
        slug = slugify(new_slug)
        if slug == document.slug:
            return document
        new_path = self._relocate(document, kind, slug)
        logger.info("Renamed %s %s -> %s", kind.value, doc_id, slug)
        return self._load(kind, new_path)

    def move(self, kind: DocumentKind, doc_id: str, target_kind: DocumentKind) -> Document:
        """Move a document to another kind, e.g. publish a draft as a post.

        Moving to a post drops the ``draft`` flag; moving to a draft sets it.

        Raises:
            NotFoundError, InvalidIdError, DuplicateSlugError
        """
        if target_kind is kind:
            return self.get(kind, doc_id)
        document = self.get(kind, doc_id)
        new_path = self._relocate(document, target_kind, document.slug)
        moved = self._load(target_kind, new_path)

        if target_kind is DocumentKind.POST and "draft" in moved.header.custom_fields:
            moved.header.delete_custom("draft")
            self.save(moved)
        elif target_kind is DocumentKind.DRAFT and moved.header.draft is None:
            moved.header.draft = True
            self.save(moved)
        logger.info("Moved %s %s -> %s", kind.value, doc_id, target_kind.value)
        return moved
