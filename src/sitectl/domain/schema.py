"""Custom-field schema — field types, groups, and the registry model.

The registry describes *how* custom frontmatter fields are edited; it
never decides whether a field is preserved. On disk it is a camelCase
JSON document::

    {
      "version": "1.0",
      "previewImageField": "cover",
      "customFields": [{"name": "cover", "type": "image", "ui": {"placeholder": "/images/..."}}],
      "fieldGroups": [{"name": "images", "fields": ["cover"], "collapsed": false}]
    }
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum
from typing import Any, Self, assert_never

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from sitectl.domain.errors import FieldTypeError
from sitectl.domain.values import (
    FieldValue,
    ValueKind,
    coerce_datetime,
    date_to_datetime,
    normalize_datetime,
    parse_date_text,
)

SCHEMA_VERSION = "1.0"
UNGROUPED_BUCKET = "custom"


class FieldType(StrEnum):
    """Editing type of a custom field.

    - string   : single-line text
    - text     : multi-line text
    - number   : int or float
    - boolean  : true/false
    - date     : calendar date
    - datetime : date-time with offset
    - image    : reference (URL/path) to an image asset
    - array    : list of values
    - object   : nested mapping
    """

    STRING = "string"
    TEXT = "text"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    DATETIME = "datetime"
    IMAGE = "image"
    ARRAY = "array"
    OBJECT = "object"

    @classmethod
    def try_parse(cls, value: str | FieldType | None) -> FieldType | None:
        """Coerce *value* to a FieldType, or ``None`` if it is not one.

        Strings are trimmed and lowercased; ``image-reference`` is accepted
        as an alias of ``image``.
        """
        if isinstance(value, FieldType):
            return value
        if value is None:
            return None
        key = str(value).strip().lower()
        if key == "image-reference":
            return cls.IMAGE
        try:
            return cls(key)
        except ValueError:
            return None


# ---------------------------------------------------------------------------
# Editing affordances
# ---------------------------------------------------------------------------


class EditorWidget(StrEnum):
    """Form widget the UI renders for a field."""

    TEXT_INPUT = "text-input"
    TEXTAREA = "textarea"
    NUMBER_INPUT = "number-input"
    CHECKBOX = "checkbox"
    DATE_PICKER = "date-picker"
    DATETIME_PICKER = "datetime-picker"
    IMAGE_PICKER = "image-picker"
    LIST_EDITOR = "list-editor"
    OBJECT_EDITOR = "object-editor"


@dataclass(frozen=True)
class EditorDescriptor:
    """How a field of a given type is edited."""

    widget: EditorWidget
    value_kind: ValueKind
    rows: int | None = None
    placeholder: str | None = None


def editor_for(field_type: FieldType) -> EditorDescriptor:
    """Map a field type to its editing affordance."""
    match field_type:
        case FieldType.STRING:
            return EditorDescriptor(EditorWidget.TEXT_INPUT, ValueKind.STRING)
        case FieldType.TEXT:
            return EditorDescriptor(EditorWidget.TEXTAREA, ValueKind.STRING, rows=4)
        case FieldType.NUMBER:
            return EditorDescriptor(EditorWidget.NUMBER_INPUT, ValueKind.NUMBER)
        case FieldType.BOOLEAN:
            return EditorDescriptor(EditorWidget.CHECKBOX, ValueKind.BOOLEAN)
        case FieldType.DATE:
            return EditorDescriptor(EditorWidget.DATE_PICKER, ValueKind.DATE)
        case FieldType.DATETIME:
            return EditorDescriptor(EditorWidget.DATETIME_PICKER, ValueKind.DATETIME)
        case FieldType.IMAGE:
            return EditorDescriptor(EditorWidget.IMAGE_PICKER, ValueKind.STRING)
        case FieldType.ARRAY:
            return EditorDescriptor(EditorWidget.LIST_EDITOR, ValueKind.ARRAY)
        case FieldType.OBJECT:
            return EditorDescriptor(EditorWidget.OBJECT_EDITOR, ValueKind.OBJECT)
        case _ as unreachable:
            assert_never(unreachable)


# ---------------------------------------------------------------------------
# Value coercion by field type
# ---------------------------------------------------------------------------

_INT_RE = re.compile(r"^[-+]?\d+$")
_FLOAT_RE = re.compile(r"^[-+]?(\d+\.\d*|\.\d+|\d+)([eE][-+]?\d+)?$")


def coerce_value(name: str, value: FieldValue, field_type: FieldType) -> FieldValue:
    """Coerce a custom-field value to the shape its schema type expects.

    ``None`` is always accepted. Coercions never lose information: a
    numeric string becomes a number, ``"true"`` becomes a boolean, an ISO
    string becomes a date or datetime.

    Raises:
        FieldTypeError: If *value* cannot represent *field_type*.
    """
    if value is None:
        return None
    match field_type:
        case FieldType.STRING | FieldType.TEXT | FieldType.IMAGE:
            if isinstance(value, str):
                return value
        case FieldType.NUMBER:
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                return value
            if isinstance(value, str):
                text = value.strip()
                if _INT_RE.match(text):
                    return int(text)
                if _FLOAT_RE.match(text):
                    return float(text)
        case FieldType.BOOLEAN:
            if isinstance(value, bool):
                return value
            if isinstance(value, str) and value.strip().lower() in ("true", "false"):
                return value.strip().lower() == "true"
        case FieldType.DATE:
            if isinstance(value, datetime):
                return normalize_datetime(value)
            if isinstance(value, date):
                return value
            if isinstance(value, str):
                parsed = parse_date_text(value)
                if parsed is not None:
                    return parsed
        case FieldType.DATETIME:
            if isinstance(value, datetime):
                return normalize_datetime(value)
            if isinstance(value, date):
                return date_to_datetime(value)
            if isinstance(value, str):
                parsed_dt = coerce_datetime(value)
                if parsed_dt is not None:
                    return parsed_dt
        case FieldType.ARRAY:
            if isinstance(value, list):
                return value
        case FieldType.OBJECT:
            if isinstance(value, dict):
                return value
        case _ as unreachable:
            assert_never(unreachable)
    raise FieldTypeError(name, field_type.value, value)


# ---------------------------------------------------------------------------
# Labels
# ---------------------------------------------------------------------------


def format_label(name: str) -> str:
    """Derive a display label from a field name.

    Examples:
        >>> format_label("list_image")
        'List Image'
        >>> format_label("mainImage")
        'Main Image'
        >>> format_label("reading-time")
        'Reading Time'
    """
    spaced = re.sub(r"[_\-]+", " ", name)
    spaced = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", " ", spaced)
    return " ".join(word[:1].upper() + word[1:] for word in spaced.split())


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

_CAMEL_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class FieldUi(BaseModel):
    """UI hints for a field."""

    model_config = _CAMEL_CONFIG

    placeholder: str | None = None
    rows: int | None = Field(default=None, ge=1)


class FieldSchema(BaseModel):
    """Description of one custom field."""

    model_config = _CAMEL_CONFIG

    name: str
    label: str | None = None
    type: FieldType = FieldType.STRING
    description: str | None = None
    ui: FieldUi | None = None

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, v: Any) -> str:
        s = "" if v is None else str(v).strip()
        if not s:
            raise ValueError("Field 'name' must not be empty")
        return s

    @property
    def display_label(self) -> str:
        """Explicit label, or one derived from the name."""
        return self.label or format_label(self.name)

    def editor(self) -> EditorDescriptor:
        """Editing affordance for this field with UI hints applied."""
        base = editor_for(self.type)
        if self.ui is None:
            return base
        return EditorDescriptor(
            widget=base.widget,
            value_kind=base.value_kind,
            rows=self.ui.rows if self.ui.rows is not None else base.rows,
            placeholder=self.ui.placeholder,
        )


class FieldGroup(BaseModel):
    """Named, collapsible bucket of field names (UI organization only)."""

    model_config = _CAMEL_CONFIG

    name: str
    label: str | None = None
    fields: list[str] = Field(default_factory=list)
    collapsed: bool | None = None

    @property
    def display_label(self) -> str:
        return self.label or format_label(self.name)


@dataclass(frozen=True)
class FieldBucket:
    """A group of field names ready for form rendering."""

    name: str
    label: str
    fields: list[str]
    collapsed: bool = False


class SchemaRegistry(BaseModel):
    """Versioned container of custom-field schemas and groups.

    ``is_default`` is True when no project config exists (or it failed
    to load); the UI uses it to offer schema generation. It is never
    written to disk.
    """

    model_config = _CAMEL_CONFIG

    version: str = SCHEMA_VERSION
    preview_image_field: str | None = None
    custom_fields: list[FieldSchema] = Field(default_factory=list)
    field_groups: list[FieldGroup] = Field(default_factory=list)
    is_default: bool = Field(default=False, exclude=True)
    load_warnings: list[str] = Field(default_factory=list, exclude=True)

    @model_validator(mode="before")
    @classmethod
    def _coerce_unknown_types(cls, data: Any) -> Any:
        """Downgrade unknown field type strings to ``string`` with a warning."""
        if not isinstance(data, dict):
            return data
        raw_fields = data.get("customFields", data.get("custom_fields"))
        if not isinstance(raw_fields, list):
            return data
        warnings = list(data.get("load_warnings", data.get("loadWarnings", [])))
        fixed: list[Any] = []
        for raw in raw_fields:
            if isinstance(raw, dict) and "type" in raw:
                raw_type = raw["type"]
                ft = FieldType.try_parse(raw_type)
                if ft is None:
                    warnings.append(
                        f"Field {raw.get('name')!r} has unknown type {raw_type!r}; using 'string'"
                    )
                    ft = FieldType.STRING
                raw = {**raw, "type": ft.value}
            fixed.append(raw)
        key = "customFields" if "customFields" in data else "custom_fields"
        data = {**data, key: fixed}
        data.pop("loadWarnings", None)
        data["load_warnings"] = warnings
        return data

    @model_validator(mode="after")
    def _check_references(self) -> Self:
        """Enforce unique names; drop group references to unknown fields."""
        seen: set[str] = set()
        for fs in self.custom_fields:
            if fs.name in seen:
                raise ValueError(f"Duplicate custom field name {fs.name!r}")
            seen.add(fs.name)

        for group in self.field_groups:
            unknown = [name for name in group.fields if name not in seen]
            if unknown:
                self.load_warnings.append(
                    f"Group {group.name!r} references unknown field(s) {unknown}; dropped"
                )
                group.fields = [name for name in group.fields if name in seen]
        return self

    # --- Query API --- #

    def field_names(self) -> list[str]:
        return [fs.name for fs in self.custom_fields]

    def get_field(self, name: str) -> FieldSchema | None:
        """Return the schema entry for *name*, or None."""
        for fs in self.custom_fields:
            if fs.name == name:
                return fs
        return None

    def field_type(self, name: str) -> FieldType | None:
        fs = self.get_field(name)
        return fs.type if fs else None

    def grouped_fields(self, custom_keys: list[str] | None = None) -> list[FieldBucket]:
        """Bucket field names for form rendering.

        Groups come first in their declared order. Registry fields not
        claimed by any group, followed by document keys the registry does
        not describe, land in the trailing ``custom`` bucket.
        """
        buckets: list[FieldBucket] = []
        claimed: set[str] = set()
        for group in self.field_groups:
            names = [n for n in group.fields if n not in claimed]
            claimed.update(names)
            buckets.append(
                FieldBucket(
                    name=group.name,
                    label=group.display_label,
                    fields=names,
                    collapsed=bool(group.collapsed),
                )
            )

        rest = [n for n in self.field_names() if n not in claimed]
        for key in custom_keys or []:
            if key not in claimed and key not in rest:
                rest.append(key)
        if rest:
            buckets.append(
                FieldBucket(name=UNGROUPED_BUCKET, label=format_label(UNGROUPED_BUCKET), fields=rest)
            )
        return buckets

    def preview_image_problem(self) -> str | None:
        """Describe a stale or mistyped ``preview_image_field``, if any.

        The registry stores the reference as-is; surfacing the problem is
        the UI's decision.
        """
        if self.preview_image_field is None:
            return None
        fs = self.get_field(self.preview_image_field)
        if fs is None:
            return f"Preview image field {self.preview_image_field!r} is not a defined custom field"
        if fs.type is not FieldType.IMAGE:
            return (
                f"Preview image field {self.preview_image_field!r} has type "
                f"{fs.type.value!r}, expected 'image'"
            )
        return None

    # --- Mutation API --- #

    def add_field(self, field: FieldSchema) -> None:
        """Append *field*.

        Raises:
            ValueError: If a field with the same name exists.
        """
        if self.get_field(field.name) is not None:
            raise ValueError(f"Duplicate custom field name {field.name!r}")
        self.custom_fields.append(field)
        self.is_default = False

    def remove_field(self, name: str) -> FieldSchema:
        """Remove *name* from the fields and from every group.

        Raises:
            KeyError: If no such field exists.
        """
        fs = self.get_field(name)
        if fs is None:
            raise KeyError(name)
        self.custom_fields.remove(fs)
        for group in self.field_groups:
            group.fields = [n for n in group.fields if n != name]
        self.is_default = False
        return fs

    def to_json_dict(self) -> dict[str, Any]:
        """On-disk JSON shape (camelCase, ``None`` values omitted)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def default(cls) -> SchemaRegistry:
        """Empty registry used when no project config exists."""
        return cls(is_default=True)
