"""Document codec — split a content file into header + body and back.

A content file starts with a ``---`` line, a YAML mapping, and a second
``---`` line. Everything after the closing delimiter line is the body,
kept byte-for-byte. The header is loaded with ruamel.yaml in round-trip
mode so quoting styles, comments and timestamp layouts of nodes that are
written back unchanged survive a save.
"""

from __future__ import annotations

from datetime import datetime
from io import StringIO
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap
from ruamel.yaml.constructor import RoundTripConstructor
from ruamel.yaml.error import YAMLError
from ruamel.yaml.representer import RoundTripRepresenter

from sitectl.domain.errors import MalformedHeaderError
from sitectl.domain.values import format_datetime

HEADER_DELIMITER = "---"
_TOML_DELIMITER = "+++"
_BOM = "\ufeff"

# ---------------------------------------------------------------------------
# YAML parser
# ---------------------------------------------------------------------------


class SourceTimestamp(datetime):
    """A datetime loaded from a header, carrying its scalar text as written.

    ruamel.yaml loads naive timestamps as plain datetimes and its own
    representer re-formats them, so the text is kept here and written
    back unchanged when the node is reused.
    """

    source_text: str | None = None

    @classmethod
    def from_loaded(cls, value: datetime, text: str) -> SourceTimestamp:
        stamp = cls(
            value.year,
            value.month,
            value.day,
            value.hour,
            value.minute,
            value.second,
            value.microsecond,
            value.tzinfo,
        )
        stamp.source_text = text
        return stamp

    def __deepcopy__(self, memo: dict[int, Any]) -> SourceTimestamp:
        return SourceTimestamp.from_loaded(self, self.source_text or format_datetime(self))


class _HeaderConstructor(RoundTripConstructor):
    """Round-trip constructor that remembers the text of timestamp scalars."""

    def construct_yaml_timestamp(self, node: Any, values: Any = None) -> Any:
        data = super().construct_yaml_timestamp(node, values)
        if isinstance(data, datetime):
            return SourceTimestamp.from_loaded(data, node.value)
        return data


_HeaderConstructor.add_constructor(
    "tag:yaml.org,2002:timestamp", _HeaderConstructor.construct_yaml_timestamp
)


class _HeaderRepresenter(RoundTripRepresenter):
    """Round-trip representer for header timestamps.

    Loaded timestamps are written with their original text. Datetimes
    created by the model are written as ISO-8601 with offset.
    """

    def represent_source_timestamp(self, data: SourceTimestamp) -> Any:
        text = data.source_text or format_datetime(data)
        return self.represent_scalar("tag:yaml.org,2002:timestamp", text)

    def represent_plain_datetime(self, data: datetime) -> Any:
        return self.represent_scalar("tag:yaml.org,2002:timestamp", format_datetime(data))


_HeaderRepresenter.add_representer(
    SourceTimestamp, _HeaderRepresenter.represent_source_timestamp
)
_HeaderRepresenter.add_representer(datetime, _HeaderRepresenter.represent_plain_datetime)


def _new_yaml() -> YAML:
    """Create a fresh round-trip YAML instance.

    ruamel.yaml's YAML object is stateful and a failed dump can leave it
    broken, so every operation gets its own.
    """
    y = YAML()
    y.Constructor = _HeaderConstructor
    y.Representer = _HeaderRepresenter
    y.preserve_quotes = True
    y.default_flow_style = False
    y.width = 4096
    y.indent(mapping=2, sequence=4, offset=2)
    return y


# ---------------------------------------------------------------------------
# Decode / encode
# ---------------------------------------------------------------------------


def _is_delimiter(line: str, marker: str = HEADER_DELIMITER) -> bool:
    return line.rstrip() == marker


def detect_newline(raw_text: str) -> str:
    """Return the line ending used by the first line of *raw_text*."""
    first_break = raw_text.find("\n")
    if first_break > 0 and raw_text[first_break - 1] == "\r":
        return "\r\n"
    return "\n"


def _check_key_collisions(node: object) -> None:
    """Reject mappings whose keys only differ by type, such as ``1`` and ``"1"``.

    Header keys are addressed by their text, so such a pair would collapse
    into one field and lose the other value.
    """
    if isinstance(node, list):
        for item in node:
            _check_key_collisions(item)
        return
    if not isinstance(node, dict):
        return
    seen: dict[str, Any] = {}
    for key, value in node.items():
        text = str(key)
        if text in seen:
            msg = f"Invalid YAML frontmatter: keys {seen[text]!r} and {key!r} collide"
            raise MalformedHeaderError(msg)
        seen[text] = key
        _check_key_collisions(value)


def load_header(yaml_block: str) -> CommentedMap:
    """Parse a YAML header block into a round-trip mapping.

    Raises:
        MalformedHeaderError: If the block is not valid YAML or its top
            level is not a mapping, or two keys share the same text.
    """
    try:
        data = _new_yaml().load(yaml_block)
    except (YAMLError, ValueError) as exc:
        msg = f"Invalid YAML frontmatter: {exc}"
        raise MalformedHeaderError(msg) from exc
    if data is None:
        return CommentedMap()
    if not isinstance(data, dict):
        msg = f"Invalid YAML frontmatter: expected a mapping, got {type(data).__name__}"
        raise MalformedHeaderError(msg)
    _check_key_collisions(data)
    return data


def decode(raw_text: str) -> tuple[CommentedMap | None, str]:
    """Split *raw_text* into ``(header, body)``.

    A leading UTF-8 byte order mark is dropped. Returns
    ``(None, raw_text)`` when the file does not open with a ``---`` line;
    the caller fills in defaults.

    Raises:
        MalformedHeaderError: If the header is opened but never closed,
            cannot be parsed, or uses the unsupported ``+++`` TOML fence.
    """
    raw_text = raw_text.removeprefix(_BOM)
    lines = raw_text.split("\n")
    if _is_delimiter(lines[0], _TOML_DELIMITER):
        msg = "TOML frontmatter (+++) is not supported; convert the header to YAML"
        raise MalformedHeaderError(msg)
    if not _is_delimiter(lines[0]):
        return None, raw_text

    for idx in range(1, len(lines)):
        if _is_delimiter(lines[idx]):
            break
    else:
        msg = "Frontmatter opened with '---' but no closing '---' line was found"
        raise MalformedHeaderError(msg)

    header = load_header("\n".join(lines[1:idx]))
    body = "\n".join(lines[idx + 1 :])
    return header, body


def dump_header(header: dict[str, Any] | None) -> str:
    """Serialize a header mapping to YAML text (empty string for no keys)."""
    if not header:
        return ""
    buf = StringIO()
    _new_yaml().dump(header, buf)
    return buf.getvalue()


def encode(header: dict[str, Any] | None, body: str, *, newline: str = "\n") -> str:
    """Render *header* and *body* back into file text.

    ``decode(encode(header, body)) == (header, body)`` for any header the
    frontmatter model produces.
    """
    text = f"{HEADER_DELIMITER}\n{dump_header(header)}{HEADER_DELIMITER}\n"
    if newline != "\n":
        text = text.replace("\n", newline)
    return text + body


def parse_value_text(text: str) -> Any:
    """Read a single value typed on a command line as YAML.

    ``5`` becomes an int, ``true`` a bool, ``[a, b]`` a list. Text that
    is not valid YAML, or parses to a mapping key-value line such as
    ``a: b``, is kept as the literal string.
    """
    try:
        value = YAML(typ="safe", pure=True).load(text)
    except YAMLError:
        return text
    if isinstance(value, dict) and ":" in text and not text.lstrip().startswith("{"):
        return text
    return value
