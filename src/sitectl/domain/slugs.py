"""Slugs, document ids and title fallbacks.

A slug is the file-system-safe stem derived from a title: ``My Post`` →
``my-post``. Document ids are slugs plus the ``.md`` suffix, optionally
nested (``2024/my-post.md``) or bundled (``my-post/index.md``).

INVARIANT: slugs contain only ``[a-z0-9-]``, never start or end with a
hyphen, and are never empty.
"""

from __future__ import annotations

import re
import unicodedata
from pathlib import PurePosixPath

from sitectl.domain.errors import InvalidIdError

FALLBACK_SLUG = "untitled"
MARKDOWN_SUFFIXES = frozenset({".md", ".markdown"})

_CYRILLIC = {
    "а": "a", "б": "b", "в": "v", "г": "g", "д": "d", "е": "e", "ё": "yo",
    "ж": "zh", "з": "z", "и": "i", "й": "y", "к": "k", "л": "l", "м": "m",
    "н": "n", "о": "o", "п": "p", "р": "r", "с": "s", "т": "t", "у": "u",
    "ф": "f", "х": "h", "ц": "ts", "ч": "ch", "ш": "sh", "щ": "shch", "ъ": "",
    "ы": "y", "ь": "", "э": "e", "ю": "yu", "я": "ya",
}  # fmt: skip
_TRANSLIT = str.maketrans(
    {**_CYRILLIC, **{k.upper(): v.capitalize() for k, v in _CYRILLIC.items()}}
)

_SEPARATORS_RE = re.compile(r"[\s_+]+")
_UNSAFE_RE = re.compile(r"[^a-z0-9-]")
_HYPHENS_RE = re.compile(r"-{2,}")
_H1_RE = re.compile(r"^#\s+(.+?)\s*#*\s*$")


def transliterate(text: str) -> str:
    """Replace Cyrillic letters with Latin and fold accents to ASCII."""
    text = text.translate(_TRANSLIT)
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def slugify(title: str) -> str:
    """Derive a file-system-safe slug from *title*.

    Examples:
        >>> slugify("My Post")
        'my-post'
        >>> slugify("Привет, мир!")
        'privet-mir'
        >>> slugify("Crème brûlée_2024")
        'creme-brulee-2024'
        >>> slugify("???")
        'untitled'
    """
    text = transliterate(title).lower()
    text = _SEPARATORS_RE.sub("-", text)
    text = _UNSAFE_RE.sub("", text)
    text = _HYPHENS_RE.sub("-", text).strip("-")
    return text or FALLBACK_SLUG


def validate_doc_id(doc_id: str) -> PurePosixPath:
    """Lexically validate a document id before any file-system access.

    Accepts forward or back slashes. Returns the normalized relative path.

    Raises:
        InvalidIdError: For empty, absolute, NUL-containing, traversing,
            or non-Markdown ids.
    """
    if not doc_id or not doc_id.strip():
        raise InvalidIdError("Document id must not be empty")
    if "\x00" in doc_id:
        raise InvalidIdError(f"Document id contains a NUL byte: {doc_id!r}")
    normalized = doc_id.replace("\\", "/")
    pure = PurePosixPath(normalized)
    if pure.is_absolute() or re.match(r"^[A-Za-z]:", normalized):
        raise InvalidIdError(f"Document id must be relative: {doc_id!r}")
    if any(part in ("..", ".") for part in normalized.split("/")):
        raise InvalidIdError(f"Document id must not contain '.' or '..' segments: {doc_id!r}")
    if pure.suffix.lower() not in MARKDOWN_SUFFIXES:
        raise InvalidIdError(f"Document id must name a Markdown file: {doc_id!r}")
    return pure


def derive_title(body: str, filename: str) -> str:
    """Title fallback: the body's first ``# H1``, else the humanized file name."""
    for line in body.splitlines():
        match = _H1_RE.match(line.strip())
        if match:
            return match.group(1)
    stem = PurePosixPath(filename).stem
    if stem == "index":
        stem = PurePosixPath(filename).parent.name or stem
    return re.sub(r"[-_]+", " ", stem).strip().capitalize() or FALLBACK_SLUG.capitalize()
