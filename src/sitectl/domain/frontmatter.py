"""Frontmatter model — typed known fields plus an open map of custom fields.

Known fields map 1:1 to the YAML keys Hugo/Hexo themes read. Every
other header key lands in :attr:`Frontmatter.custom_fields`, whether or
not the schema describes it; the schema only decides how a value is
coerced and edited.

Fields the user never touched are written back from their original YAML
node (quoting and timestamp layout intact). Edited fields are
normalized: datetimes become ISO-8601 with offset, strings are quoted
only where YAML requires it.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from ruamel.yaml.comments import CommentedMap

from sitectl.domain.errors import FieldTypeError
from sitectl.domain.schema import SchemaRegistry, coerce_value
from sitectl.domain.types import DocumentKind
from sitectl.domain.values import (
    FieldValue,
    coerce_datetime,
    kind_of,
    normalize_datetime,
    to_jsonable,
    to_plain,
)

# ---------------------------------------------------------------------------
# Canonical known-field ordering
# ---------------------------------------------------------------------------

KNOWN_FIELDS: tuple[str, ...] = (
    "title",
    "date",
    "updated",
    "tags",
    "categories",
    "permalink",
    "layout",
    "description",
    "comments",
    "draft",
)

STRING_FIELDS = frozenset({"title", "permalink", "layout", "description"})
_DATE_FIELDS = frozenset({"date", "updated"})
TERM_FIELDS = frozenset({"tags", "categories"})
_BOOL_FIELDS = frozenset({"comments", "draft"})
_REQUIRED_FIELDS = ("title", "date")

_MISSING = object()


def known_fields_for(kind: DocumentKind) -> tuple[str, ...]:
    """Known fields in canonical order; ``draft`` only for pages and drafts."""
    if kind.allows_draft_flag:
        return KNOWN_FIELDS
    return tuple(name for name in KNOWN_FIELDS if name != "draft")


def _zero_value(name: str) -> Any:
    if name == "title":
        return ""
    if name in TERM_FIELDS:
        return []
    return None


def coerce_known(name: str, raw: object) -> Any:
    """Coerce a raw header value to the fixed type of known field *name*.

    Raises:
        FieldTypeError: If the value has the wrong shape.
    """
    value = to_plain(raw)
    if value is None:
        return _zero_value(name)

    if name in STRING_FIELDS:
        if isinstance(value, str):
            return value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        raise FieldTypeError(name, "string", value)

    if name in _DATE_FIELDS:
        parsed = coerce_datetime(value)
        if parsed is None:
            raise FieldTypeError(name, "date or date-time", value)
        return parsed

    if name in TERM_FIELDS:
        if not isinstance(value, list):
            raise FieldTypeError(name, "list of strings", value)
        terms: list[str] = []
        for item in value:
            if isinstance(item, str):
                terms.append(item)
            elif isinstance(item, (int, float)) and not isinstance(item, bool):
                terms.append(str(item))
            else:
                raise FieldTypeError(name, "list of strings", value)
        return terms

    if name in _BOOL_FIELDS:
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in ("true", "false"):
            return value.strip().lower() == "true"
        raise FieldTypeError(name, "boolean", value)

    msg = f"Unknown known field: {name!r}"
    raise KeyError(msg)


def _same_value(a: object, b: object) -> bool:
    """Type-strict equality: ``1``, ``1.0`` and ``True`` are all different."""
    if type(a) is not type(b):
        return False
    if isinstance(a, dict):
        assert isinstance(b, dict)
        return list(a) == list(b) and all(_same_value(a[k], b[k]) for k in a)
    if isinstance(a, list):
        assert isinstance(b, list)
        return len(a) == len(b) and all(_same_value(x, y) for x, y in zip(a, b, strict=True))
    if isinstance(a, datetime):
        assert isinstance(b, datetime)
        return a == b and a.utcoffset() == b.utcoffset()
    return a == b


def _check_value(name: str, value: object) -> None:
    """Validate that *value* lies inside the header value variant set."""
    kind_of(value)  # type: ignore[arg-type]
    if isinstance(value, dict):
        for k, v in value.items():
            if not isinstance(k, str):
                raise TypeError(f"Custom field {name!r} has a non-string key {k!r}")
            _check_value(name, v)
    elif isinstance(value, list):
        for v in value:
            _check_value(name, v)


def _with_offsets(value: FieldValue) -> FieldValue:
    """Give every naive datetime in *value* the local offset."""
    if isinstance(value, datetime):
        return normalize_datetime(value)
    if isinstance(value, list):
        return [_with_offsets(v) for v in value]
    if isinstance(value, dict):
        return {k: _with_offsets(v) for k, v in value.items()}
    return value


# ---------------------------------------------------------------------------
# Model
# ---------------------------------------------------------------------------


@dataclass
class Frontmatter:
    """Typed document header.

    Equality compares field values only; warnings and the original YAML
    source are ignored.
    """

    title: str = ""
    date: datetime | None = None
    updated: datetime | None = None
    tags: list[str] = field(default_factory=list)
    categories: list[str] = field(default_factory=list)
    permalink: str | None = None
    layout: str | None = None
    description: str | None = None
    comments: bool | None = None
    draft: bool | None = None
    custom_fields: dict[str, FieldValue] = field(default_factory=dict)
    kind: DocumentKind = field(default=DocumentKind.POST, compare=False)
    warnings: list[str] = field(default_factory=list, compare=False, repr=False)

    _source: CommentedMap | None = field(default=None, init=False, compare=False, repr=False)
    _source_keys: dict[str, Any] = field(
        default_factory=dict, init=False, compare=False, repr=False
    )
    _baseline_known: dict[str, Any] = field(
        default_factory=dict, init=False, compare=False, repr=False
    )
    _baseline_custom: dict[str, FieldValue] = field(
        default_factory=dict, init=False, compare=False, repr=False
    )

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def parse(
        cls,
        header: CommentedMap | dict[str, Any] | None,
        schema: SchemaRegistry | None = None,
        kind: DocumentKind = DocumentKind.POST,
    ) -> Frontmatter:
        """Build a Frontmatter from a decoded header mapping.

        Field-level problems never abort the parse: a known field with the
        wrong shape falls back to its zero value, a custom field that does
        not match its schema type is kept as written, and both are
        recorded in :attr:`warnings`.
        """
        fm = cls(kind=kind)
        if header is None:
            return fm

        known = known_fields_for(kind)
        for raw_key, raw_value in header.items():
            name = str(raw_key)
            fm._source_keys[name] = raw_key
            if name in known:
                try:
                    setattr(fm, name, coerce_known(name, raw_value))
                except FieldTypeError as exc:
                    fm.warnings.append(str(exc))
                    setattr(fm, name, _zero_value(name))
                continue

            value = to_plain(raw_value)
            field_type = schema.field_type(name) if schema is not None else None
            if field_type is not None:
                try:
                    value = coerce_value(name, value, field_type)
                except FieldTypeError as exc:
                    fm.warnings.append(f"{exc}; keeping the value as written")
            fm.custom_fields[name] = value

        for name in _REQUIRED_FIELDS:
            if name not in fm._source_keys:
                fm.warnings.append(f"Missing required field {name!r}")

        fm._rebase(header if isinstance(header, CommentedMap) else CommentedMap(header))
        return fm

    @classmethod
    def new(
        cls,
        title: str,
        *,
        date: datetime | None = None,
        kind: DocumentKind = DocumentKind.POST,
    ) -> Frontmatter:
        """Fresh header for a newly created document."""
        stamp = date or datetime.now().astimezone().replace(microsecond=0)
        fm = cls(title=title, date=stamp, kind=kind)
        if kind is DocumentKind.DRAFT:
            fm.draft = True
        return fm

    # ------------------------------------------------------------------
    # Known fields
    # ------------------------------------------------------------------

    def known_fields(self) -> tuple[str, ...]:
        return known_fields_for(self.kind)

    def _require_known(self, name: str) -> None:
        if name not in self.known_fields():
            msg = f"{name!r} is not a known field for {self.kind.value} documents"
            raise KeyError(msg)

    def get(self, name: str) -> Any:
        """Return the value of known field *name*."""
        self._require_known(name)
        return getattr(self, name)

    def set(self, name: str, value: object) -> None:
        """Set known field *name*, coercing *value* to its fixed type.

        Raises:
            KeyError: If *name* is not a known field for this kind.
            FieldTypeError: If *value* has the wrong shape.
        """
        self._require_known(name)
        setattr(self, name, coerce_known(name, value))

    # --- Tags / categories (index-based so duplicates stay addressable) --- #

    def _terms(self, name: str) -> list[str]:
        if name not in TERM_FIELDS:
            msg = f"{name!r} is not a list field; expected one of {sorted(TERM_FIELDS)}"
            raise KeyError(msg)
        terms: list[str] = getattr(self, name)
        return terms

    def add_term(self, name: str, value: str, index: int | None = None) -> None:
        """Insert *value* into tags/categories at *index* (append when None)."""
        terms = self._terms(name)
        if not isinstance(value, str) or not value.strip():
            raise FieldTypeError(name, "non-empty string", value)
        if index is None:
            terms.append(value.strip())
            return
        if not 0 <= index <= len(terms):
            raise IndexError(f"{name} index {index} out of range (0..{len(terms)})")
        terms.insert(index, value.strip())

    def remove_term(self, name: str, index: int) -> str:
        """Remove and return the term at *index*."""
        terms = self._terms(name)
        if not 0 <= index < len(terms):
            raise IndexError(f"{name} index {index} out of range")
        return terms.pop(index)

    def move_term(self, name: str, src: int, dst: int) -> None:
        """Move the term at *src* to position *dst*."""
        terms = self._terms(name)
        if not (0 <= src < len(terms) and 0 <= dst < len(terms)):
            raise IndexError(f"{name} move {src}->{dst} out of range")
        terms.insert(dst, terms.pop(src))

    def add_tag(self, value: str, index: int | None = None) -> None:
        self.add_term("tags", value, index)

    def remove_tag(self, index: int) -> str:
        return self.remove_term("tags", index)

    def add_category(self, value: str, index: int | None = None) -> None:
        self.add_term("categories", value, index)

    def remove_category(self, index: int) -> str:
        return self.remove_term("categories", index)

    # ------------------------------------------------------------------
    # Custom fields
    # ------------------------------------------------------------------

    def get_custom(self, name: str) -> FieldValue:
        return self.custom_fields[name]

    def set_custom(self, name: str, value: FieldValue) -> None:
        """Set custom field *name*.

        Raises:
            ValueError: If *name* is a known field (use :meth:`set`).
            TypeError: If *value* is outside the header value variant set.
        """
        if name in self.known_fields():
            msg = f"{name!r} is a known field; use set()"
            raise ValueError(msg)
        if not name.strip():
            raise ValueError("Custom field name must not be empty")
        _check_value(name, value)
        self.custom_fields[name] = _with_offsets(value)

    def delete_custom(self, name: str) -> FieldValue:
        """Remove custom field *name* and return its value (``KeyError`` if absent)."""
        return self.custom_fields.pop(name)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def _source_node(self, name: str) -> tuple[Any, Any]:
        assert self._source is not None
        key = self._source_keys[name]
        return key, self._source[key]

    def _copy_comment(self, out: CommentedMap, key: Any) -> None:
        if self._source is not None and key in self._source.ca.items:
            out.ca.items[key] = self._source.ca.items[key]

    def to_header_block(self) -> CommentedMap:
        """Build the header mapping for the codec.

        Known fields come first in canonical order, then custom fields in
        their in-memory order. Unset optional fields are omitted.
        """
        out = CommentedMap()
        for name in self.known_fields():
            value = getattr(self, name)
            baseline = self._baseline_known.get(name, _MISSING)
            if name in self._source_keys and _same_value(baseline, value):
                key, node = self._source_node(name)
                out[key] = node
                self._copy_comment(out, key)
                continue
            if value is None or value == [] or (name == "title" and value == ""):
                continue
            out[name] = list(value) if isinstance(value, list) else value

        for name, value in self.custom_fields.items():
            baseline = self._baseline_custom.get(name, _MISSING)
            if name in self._source_keys and _same_value(baseline, value):
                key, node = self._source_node(name)
                out[key] = node
                self._copy_comment(out, key)
                continue
            out[name] = copy.deepcopy(value)
        return out

    def _rebase(self, header: CommentedMap) -> None:
        """Adopt *header* as the verbatim source for unchanged fields."""
        self._source = header
        self._source_keys = {str(k): k for k in header}
        self._baseline_known = {
            name: copy.deepcopy(getattr(self, name)) for name in self.known_fields()
        }
        self._baseline_custom = copy.deepcopy(self.custom_fields)

    def mark_saved(self, header: CommentedMap) -> None:
        """Record that *header* (from :meth:`to_header_block`) was written."""
        self._rebase(header)

    def is_modified(self) -> bool:
        """True if any field differs from what was parsed or last saved."""
        if self._source is None:
            return True
        for name in self.known_fields():
            if not _same_value(self._baseline_known.get(name, _MISSING), getattr(self, name)):
                return True
        return not _same_value(self._baseline_custom, self.custom_fields)

    def to_json_dict(self) -> dict[str, Any]:
        """JSON-friendly view of all fields (dates as ISO-8601 strings)."""
        data: dict[str, Any] = {}
        for name in self.known_fields():
            data[name] = to_jsonable(getattr(self, name))
        data["custom_fields"] = to_jsonable(self.custom_fields)
        return data
