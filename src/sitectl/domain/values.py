"""Header value variant set and date helpers.

Frontmatter values are a closed set of shapes::

    FieldValue = str | int | float | bool | date | datetime
               | list[FieldValue] | dict[str, FieldValue] | None

:class:`ValueKind` names each shape and :func:`kind_of` classifies a
value exhaustively. ruamel.yaml round-trip types (``CommentedMap``,
``ScalarFloat``, ``TimeStamp`` ...) are converted into this set by
:func:`to_plain` before they reach the model.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time
from enum import StrEnum
from typing import TypeAlias, Union

from ruamel.yaml.comments import CommentedMap, CommentedSeq, TaggedScalar
from ruamel.yaml.scalarbool import ScalarBoolean

FieldValue: TypeAlias = Union[
    str,
    int,
    float,
    bool,
    date,
    datetime,
    list["FieldValue"],
    dict[str, "FieldValue"],
    None,
]


class ValueKind(StrEnum):
    """Shape of a single header value."""

    NULL = "null"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    DATETIME = "datetime"
    ARRAY = "array"
    OBJECT = "object"


def kind_of(value: FieldValue) -> ValueKind:
    """Classify *value* into its :class:`ValueKind`.

    Raises:
        TypeError: If *value* is outside the variant set.
    """
    match value:
        case None:
            return ValueKind.NULL
        # bool before int: bool is an int subclass
        case bool():
            return ValueKind.BOOLEAN
        case int() | float():
            return ValueKind.NUMBER
        case str():
            return ValueKind.STRING
        # datetime before date: datetime is a date subclass
        case datetime():
            return ValueKind.DATETIME
        case date():
            return ValueKind.DATE
        case list():
            return ValueKind.ARRAY
        case dict():
            return ValueKind.OBJECT
        case _:
            msg = f"Unsupported header value type: {type(value).__name__}"
            raise TypeError(msg)


def to_plain(value: object) -> FieldValue:
    """Convert a ruamel.yaml round-trip value into the plain variant set."""
    if value is None:
        return None
    if isinstance(value, ScalarBoolean):
        return bool(value)
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return int(value)
    if isinstance(value, float):
        return float(value)
    if isinstance(value, str):
        return str(value)
    if isinstance(value, datetime):
        return normalize_datetime(
            datetime(
                value.year,
                value.month,
                value.day,
                value.hour,
                value.minute,
                value.second,
                value.microsecond,
                value.tzinfo,
            )
        )
    if isinstance(value, date):
        return date(value.year, value.month, value.day)
    if isinstance(value, (CommentedMap, dict)):
        return {str(k): to_plain(v) for k, v in value.items()}
    if isinstance(value, (CommentedSeq, list, tuple)):
        return [to_plain(v) for v in value]
    if isinstance(value, TaggedScalar):
        return str(value.value)
    # Sets, omaps and other exotic YAML types surface as text.
    return str(value)


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_DATETIME_RE = re.compile(r"^\d{4}-\d{2}-\d{2}[Tt ]\d{2}:\d{2}")


def normalize_datetime(value: datetime) -> datetime:
    """Attach the local offset to a naive datetime; aware values pass through."""
    if value.tzinfo is None:
        return value.astimezone()
    return value


def date_to_datetime(value: date) -> datetime:
    """Midnight local time on *value*, with explicit offset."""
    return datetime.combine(value, time()).astimezone()


def parse_date_text(text: str) -> date | datetime | None:
    """Parse an ISO-8601 date or date-time string.

    Returns a ``date`` for bare calendar dates, an aware ``datetime`` for
    date-time forms, or ``None`` when *text* is neither.
    """
    s = text.strip()
    if _DATE_RE.match(s):
        try:
            return date.fromisoformat(s)
        except ValueError:
            return None
    if _DATETIME_RE.match(s):
        try:
            return normalize_datetime(datetime.fromisoformat(f"{s[:10]}T{s[11:]}"))
        except ValueError:
            return None
    return None


def coerce_datetime(value: object) -> datetime | None:
    """Coerce a date, datetime or ISO string to an aware datetime."""
    if isinstance(value, datetime):
        return normalize_datetime(value)
    if isinstance(value, date):
        return date_to_datetime(value)
    if isinstance(value, str):
        parsed = parse_date_text(value)
        if isinstance(parsed, datetime):
            return parsed
        if isinstance(parsed, date):
            return date_to_datetime(parsed)
    return None


def format_datetime(value: datetime) -> str:
    """Render *value* in the single ISO-8601-with-offset form."""
    return normalize_datetime(value).isoformat()


def to_jsonable(value: object) -> object:
    """Render dates as ISO-8601 strings, recursing into lists and dicts."""
    if isinstance(value, datetime):
        return format_datetime(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, list):
        return [to_jsonable(v) for v in value]
    return value
