"""Filesystem operations for site content.

INVARIANT: Files are truth. Nothing about a document is cached outside
its Markdown file.

Pure parsing/rendering lives in :mod:`sitectl.domain.codec`. This module
handles actual file I/O, id-to-path resolution, and file discovery.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from sitectl.domain.errors import InvalidIdError
from sitectl.domain.slugs import MARKDOWN_SUFFIXES, validate_doc_id
from sitectl.domain.types import DocumentKind
from sitectl.infrastructure.project import ProjectContext

logger = logging.getLogger(__name__)

BUNDLE_INDEX = "index.md"


# ---------------------------------------------------------------------------
# File I/O
# ---------------------------------------------------------------------------


def read_text(path: Path) -> str:
    """Read *path* as UTF-8 without newline translation."""
    return path.read_bytes().decode("utf-8")


def atomic_write(path: Path, text: str) -> None:
    """Write *text* to *path* so readers see the old or the new file, never half.

    The data goes to a temporary file in the same directory, is fsynced,
    then moved over *path* with :func:`os.replace`. Creates parent
    directories if they don't exist.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(text.encode("utf-8"))
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    logger.debug("Wrote %s (%d chars)", path, len(text))


# ---------------------------------------------------------------------------
# Path resolution
# ---------------------------------------------------------------------------


def resolve_doc_path(project: ProjectContext, kind: DocumentKind, doc_id: str) -> Path:
    """Resolve *doc_id* to a file under the content root of *kind*.

    The id is checked lexically first, so a traversal attempt never
    touches the file system. The resolved path is then re-checked
    against the resolved content root to catch symlink escapes.

    Raises:
        InvalidIdError: If the id is malformed or escapes the content root.
    """
    pure = validate_doc_id(doc_id)
    root = project.content_root(kind)
    result = root.joinpath(*pure.parts)

    if not result.resolve().is_relative_to(root.resolve()):
        msg = f"Document id escapes the {kind.value} root: {doc_id!r}"
        raise InvalidIdError(msg)
    return result


def doc_id_for(root: Path, path: Path) -> str:
    """Forward-slash id of *path* relative to *root*."""
    return path.relative_to(root).as_posix()


def slug_taken(root: Path, slug: str) -> bool:
    """True if ``<slug>.md`` or the bundle ``<slug>/index.md`` exists under *root*."""
    return (root / f"{slug}.md").exists() or (root / slug / BUNDLE_INDEX).exists()


def find_documents(project: ProjectContext, kind: DocumentKind) -> list[Path]:
    """Discover the content files of *kind*.

    Picks up top-level Markdown files and ``<dir>/index.md`` bundles.
    Skips dot-directories and the directories that belong to other kinds
    (pages live in ``content/``, which contains ``content/posts``).
    """
    root = project.content_root(kind)
    if not root.is_dir():
        return []

    skip = {p.resolve() for p in project.other_content_roots(kind)}
    results: list[Path] = []
    for entry in root.iterdir():
        if entry.name.startswith("."):
            continue
        if entry.is_file():
            if entry.suffix.lower() in MARKDOWN_SUFFIXES:
                results.append(entry)
        elif entry.is_dir() and entry.resolve() not in skip:
            index = entry / BUNDLE_INDEX
            if index.is_file():
                results.append(index)
    return sorted(results)
