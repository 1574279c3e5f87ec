"""Content kinds.

The kind of a document decides where it is stored and which known
frontmatter fields apply to it.
"""

from __future__ import annotations

from enum import StrEnum


class DocumentKind(StrEnum):
    """Content entity categories of a site project."""

    POST = "post"
    PAGE = "page"
    DRAFT = "draft"

    @property
    def allows_draft_flag(self) -> bool:
        """Whether ``draft`` is a known field for this kind."""
        return self is not DocumentKind.POST
