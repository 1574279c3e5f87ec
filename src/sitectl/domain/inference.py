"""Schema inference — derive a starter registry from existing content.

Scans the custom fields of every document, unions the keys in
first-seen order and picks the most specific type that fits every
observed value. Documents are visited in ``(kind, id)`` order so the
result does not depend on the order the caller listed them in.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime

from sitectl.domain.document import Document
from sitectl.domain.schema import FieldGroup, FieldSchema, FieldType, SchemaRegistry, format_label
from sitectl.domain.values import FieldValue, parse_date_text

logger = logging.getLogger(__name__)

DEFAULT_LONG_TEXT_THRESHOLD = 80
IMAGE_NAME_HINTS = ("image", "cover", "thumbnail", "banner")
IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg", ".gif", ".webp", ".svg", ".avif", ".ico")
IMAGES_GROUP = "images"


def observe(value: FieldValue, long_text_threshold: int = DEFAULT_LONG_TEXT_THRESHOLD) -> FieldType | None:
    """Classify a single observed value; ``None`` for null or blank values."""
    match value:
        case None:
            return None
        case bool():
            return FieldType.BOOLEAN
        case int() | float():
            return FieldType.NUMBER
        case datetime():
            return FieldType.DATETIME
        case date():
            return FieldType.DATE
        case list():
            return FieldType.ARRAY
        case dict():
            return FieldType.OBJECT
        case str():
            if not value.strip():
                return None
            parsed = parse_date_text(value)
            if isinstance(parsed, datetime):
                return FieldType.DATETIME
            if isinstance(parsed, date):
                return FieldType.DATE
            if "\n" in value or len(value) > long_text_threshold:
                return FieldType.TEXT
            return FieldType.STRING
    return FieldType.STRING


def merge_types(observed: set[FieldType]) -> FieldType:
    """Most specific type covering every observation."""
    if len(observed) == 1:
        return next(iter(observed))
    if observed == {FieldType.STRING, FieldType.TEXT}:
        return FieldType.TEXT
    if observed == {FieldType.DATE, FieldType.DATETIME}:
        return FieldType.DATETIME
    # Empty or mixed: string never loses data on round-trip.
    return FieldType.STRING


def looks_like_image_path(value: str) -> bool:
    s = value.strip().lower()
    return s.startswith("/") or "/images/" in s or s.endswith(IMAGE_EXTENSIONS)


def is_image_name(name: str) -> bool:
    lowered = name.lower()
    return any(hint in lowered for hint in IMAGE_NAME_HINTS)


def _alt_companions(name: str, keys: Iterable[str]) -> list[str]:
    wanted = (f"{name}_alt", f"{name}Alt")
    return [key for key in keys if key in wanted]


def infer_schema(
    documents: Iterable[Document],
    *,
    long_text_threshold: int = DEFAULT_LONG_TEXT_THRESHOLD,
) -> SchemaRegistry:
    """Build a non-default :class:`SchemaRegistry` from *documents*."""
    ordered = sorted(documents, key=lambda d: (d.kind.value, d.id))

    observations: dict[str, set[FieldType]] = {}
    samples: dict[str, list[str]] = {}
    for doc in ordered:
        for name, value in doc.header.custom_fields.items():
            seen = observations.setdefault(name, set())
            samples.setdefault(name, [])
            kind = observe(value, long_text_threshold)
            if kind is None:
                continue
            seen.add(kind)
            if isinstance(value, str):
                samples[name].append(value)

    fields: list[FieldSchema] = []
    image_fields: list[str] = []
    for name, seen in observations.items():
        field_type = merge_types(seen)
        if (
            field_type is FieldType.STRING
            and is_image_name(name)
            and samples[name]
            and all(looks_like_image_path(v) for v in samples[name])
        ):
            field_type = FieldType.IMAGE
            image_fields.append(name)
        fields.append(FieldSchema(name=name, label=format_label(name), type=field_type))

    groups: list[FieldGroup] = []
    if image_fields:
        members: list[str] = []
        for name in image_fields:
            for member in (name, *_alt_companions(name, observations)):
                if member not in members:
                    members.append(member)
        groups.append(FieldGroup(name=IMAGES_GROUP, label=format_label(IMAGES_GROUP), fields=members))

    preview = image_fields[0] if len(image_fields) == 1 else None
    if len(image_fields) > 1:
        logger.info("Several image fields found (%s); preview image left unset", image_fields)

    logger.debug("Inferred %d field(s) from %d document(s)", len(fields), len(ordered))
    return SchemaRegistry(
        preview_image_field=preview,
        custom_fields=fields,
        field_groups=groups,
        is_default=False,
    )
