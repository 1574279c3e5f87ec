"""ContentService — list, show, create and edit documents.

Each operation loads the document from disk, applies one change through
the frontmatter mutation API, and saves it back. Field-level parse
problems surface as result warnings; the operation still succeeds.
"""

from __future__ import annotations

from typing import Any

from sitectl.domain.codec import parse_value_text
from sitectl.domain.document import Document, DocumentSummary
from sitectl.domain.errors import FieldTypeError, SitectlError
from sitectl.domain.frontmatter import STRING_FIELDS, TERM_FIELDS
from sitectl.domain.schema import FieldType, coerce_value
from sitectl.domain.types import DocumentKind
from sitectl.domain.values import to_jsonable, to_plain
from sitectl.services.base import BaseService
from sitectl.services.result import ServiceResult

_REQUIRED = ("title", "date")
_TEXT_TYPES = (FieldType.STRING, FieldType.TEXT, FieldType.IMAGE)


def summary_dict(summary: DocumentSummary) -> dict[str, Any]:
    return {
        "id": summary.id,
        "kind": summary.kind.value,
        "title": summary.title,
        "date": to_jsonable(summary.date),
        "modified_at": to_jsonable(summary.modified_at),
        "tags": summary.tags,
        "draft": summary.draft,
        "error": summary.error,
    }


def _ref(doc: Document) -> dict[str, Any]:
    return {"id": doc.id, "kind": doc.kind.value, "path": str(doc.path), "title": doc.title}


class ContentService(BaseService):
    """Document-level operations for the CLI."""

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def list_documents(self, kind: DocumentKind) -> ServiceResult:
        op = "list_documents"
        try:
            summaries = self._repo.list(kind)
        except (SitectlError, OSError) as exc:
            return self._fail(op, exc)
        warnings = [f"{s.id}: {s.error}" for s in summaries if s.error]
        return ServiceResult(
            ok=True,
            op=op,
            data={"kind": kind.value, "items": [summary_dict(s) for s in summaries]},
            warnings=warnings,
            meta={"count": len(summaries)},
        )

    def show(self, kind: DocumentKind, doc_id: str) -> ServiceResult:
        op = "show_document"
        try:
            doc = self._repo.get(kind, doc_id)
        except (SitectlError, OSError) as exc:
            return self._fail(op, exc)

        registry = self._repo.registry
        buckets = registry.grouped_fields(list(doc.header.custom_fields))
        return ServiceResult(
            ok=True,
            op=op,
            data={
                **_ref(doc),
                "header": doc.header.to_json_dict(),
                "body": doc.body,
                "created_at": to_jsonable(doc.created_at),
                "modified_at": to_jsonable(doc.modified_at),
                "groups": [
                    {"name": b.name, "label": b.label, "fields": b.fields, "collapsed": b.collapsed}
                    for b in buckets
                ],
            },
            warnings=doc.warnings,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def create(self, kind: DocumentKind, title: str) -> ServiceResult:
        op = "create_document"
        try:
            doc = self._repo.create(kind, title)
        except (SitectlError, OSError) as exc:
            return self._fail(op, exc)
        return ServiceResult(ok=True, op=op, data=_ref(doc))

    def delete(self, kind: DocumentKind, doc_id: str) -> ServiceResult:
        op = "delete_document"
        try:
            path = self._repo.delete(kind, doc_id)
        except (SitectlError, OSError) as exc:
            return self._fail(op, exc)
        return ServiceResult(
            ok=True, op=op, data={"id": doc_id, "kind": kind.value, "path": str(path)}
        )

    def rename(self, kind: DocumentKind, doc_id: str, new_slug: str) -> ServiceResult:
        op = "rename_document"
        try:
            doc = self._repo.rename(kind, doc_id, new_slug)
        except (SitectlError, OSError) as exc:
            return self._fail(op, exc)
        return ServiceResult(ok=True, op=op, data={**_ref(doc), "old_id": doc_id})

    def move(self, kind: DocumentKind, doc_id: str, target: DocumentKind) -> ServiceResult:
        op = "move_document"
        try:
            doc = self._repo.move(kind, doc_id, target)
        except (SitectlError, OSError) as exc:
            return self._fail(op, exc)
        return ServiceResult(
            ok=True, op=op, data={**_ref(doc), "old_id": doc_id, "old_kind": kind.value}
        )

    # ------------------------------------------------------------------
    # Field edits
    # ------------------------------------------------------------------

    def _coerce_input(self, doc: Document, name: str, text: str) -> Any:
        """Turn command-line *text* into a header value for field *name*."""
        if name in STRING_FIELDS:
            return text
        if name in TERM_FIELDS:
            value = parse_value_text(text)
            if isinstance(value, str):
                return [part.strip() for part in value.split(",") if part.strip()]
            return value
        if name in doc.header.known_fields():
            return parse_value_text(text)

        field_type = self._repo.registry.field_type(name)
        if field_type in _TEXT_TYPES:
            return text
        value = to_plain(parse_value_text(text))
        if field_type is not None:
            value = coerce_value(name, value, field_type)
        return value

    def set_field(self, kind: DocumentKind, doc_id: str, name: str, text: str) -> ServiceResult:
        """Set a known or custom field from its command-line text form."""
        op = "set_field"
        try:
            doc = self._repo.get(kind, doc_id)
            value = self._coerce_input(doc, name, text)
            if name in doc.header.known_fields():
                doc.header.set(name, value)
                stored = doc.header.get(name)
            else:
                doc.header.set_custom(name, value)
                stored = doc.header.get_custom(name)
            self._repo.save(doc)
        except (SitectlError, OSError) as exc:
            return self._fail(op, exc)
        except (TypeError, ValueError) as exc:
            return ServiceResult.failure(op, FieldTypeError.code, str(exc))
        return ServiceResult(
            ok=True,
            op=op,
            data={**_ref(doc), "field": name, "value": to_jsonable(stored)},
            warnings=doc.warnings,
        )

    def unset_field(self, kind: DocumentKind, doc_id: str, name: str) -> ServiceResult:
        """Clear a known optional field or delete a custom field."""
        op = "unset_field"
        if name in _REQUIRED:
            return ServiceResult.failure(
                op, "REQUIRED_FIELD", f"{name!r} is required and cannot be removed"
            )
        try:
            doc = self._repo.get(kind, doc_id)
            if name in doc.header.known_fields():
                doc.header.set(name, None)
            elif name in doc.header.custom_fields:
                doc.header.delete_custom(name)
            else:
                return ServiceResult.failure(
                    op, "NOT_FOUND", f"{doc.id} has no field {name!r}"
                )
            self._repo.save(doc)
        except (SitectlError, OSError) as exc:
            return self._fail(op, exc)
        return ServiceResult(ok=True, op=op, data={**_ref(doc), "field": name})

    def add_term(
        self,
        kind: DocumentKind,
        doc_id: str,
        value: str,
        *,
        field: str = "tags",
        index: int | None = None,
    ) -> ServiceResult:
        """Insert a tag or category, appending when *index* is None."""
        op = "add_term"
        try:
            doc = self._repo.get(kind, doc_id)
            doc.header.add_term(field, value, index)
            self._repo.save(doc)
        except (SitectlError, OSError) as exc:
            return self._fail(op, exc)
        except (KeyError, IndexError) as exc:
            return ServiceResult.failure(op, "INVALID_ARGUMENT", str(exc).strip("'\""))
        return ServiceResult(
            ok=True, op=op, data={**_ref(doc), "field": field, field: list(getattr(doc.header, field))}
        )

    def remove_term(
        self,
        kind: DocumentKind,
        doc_id: str,
        index: int,
        *,
        field: str = "tags",
    ) -> ServiceResult:
        """Remove the tag or category at *index*."""
        op = "remove_term"
        try:
            doc = self._repo.get(kind, doc_id)
            removed = doc.header.remove_term(field, index)
            self._repo.save(doc)
        except (SitectlError, OSError) as exc:
            return self._fail(op, exc)
        except (KeyError, IndexError) as exc:
            return ServiceResult.failure(op, "INVALID_ARGUMENT", str(exc).strip("'\""))
        return ServiceResult(
            ok=True,
            op=op,
            data={
                **_ref(doc),
                "field": field,
                "removed": removed,
                field: list(getattr(doc.header, field)),
            },
        )
