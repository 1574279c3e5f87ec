"""Error taxonomy for the content core.

Every error that can reach the UI boundary carries a human-readable
message and a stable ``code`` used in :class:`ServiceError` payloads.
File-system failures are not wrapped: they propagate as ``OSError``.
"""

from __future__ import annotations


class SitectlError(Exception):
    """Base class for all content-core errors."""

    code: str = "ERROR"


class MalformedHeaderError(SitectlError):
    """The frontmatter block is unterminated or is not a YAML mapping."""

    code = "MALFORMED_HEADER"


class FieldTypeError(SitectlError):
    """A header field holds a value of the wrong shape."""

    code = "FIELD_TYPE"

    def __init__(self, field: str, expected: str, actual: object) -> None:
        self.field = field
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Field {field!r} expected {expected}, got {type(actual).__name__} ({actual!r})"
        )


class SchemaLoadError(SitectlError):
    """The frontmatter config file is not valid JSON or violates the schema."""

    code = "SCHEMA_LOAD"


class DuplicateSlugError(SitectlError):
    """A document with the same slug already exists for the kind."""

    code = "DUPLICATE_SLUG"


class NotFoundError(SitectlError):
    """An id does not resolve to an existing file."""

    code = "NOT_FOUND"


class InvalidIdError(SitectlError):
    """An id is malformed or would escape its content root."""

    code = "INVALID_ID"
