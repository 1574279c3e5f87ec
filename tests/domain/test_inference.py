"""Tests for schema inference from existing documents."""

from __future__ import annotations

import random
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import pytest

from sitectl.domain.document import Document
from sitectl.domain.frontmatter import Frontmatter
from sitectl.domain.inference import (
    IMAGES_GROUP,
    infer_schema,
    looks_like_image_path,
    merge_types,
    observe,
)
from sitectl.domain.schema import FieldType
from sitectl.domain.types import DocumentKind


def _doc(doc_id: str, kind: DocumentKind = DocumentKind.POST, **custom: Any) -> Document:
    return Document(
        id=doc_id,
        path=Path("/site/content") / doc_id,
        kind=kind,
        header=Frontmatter(title=doc_id, custom_fields=dict(custom)),
    )


class TestObserve:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (None, None),
            ("   ", None),
            (True, FieldType.BOOLEAN),
            (3, FieldType.NUMBER),
            (1.5, FieldType.NUMBER),
            ("short", FieldType.STRING),
            ("line\nbreak", FieldType.TEXT),
            ("x" * 81, FieldType.TEXT),
            ("2024-01-01", FieldType.DATE),
            ("2024-01-01T10:00:00+02:00", FieldType.DATETIME),
            (date(2024, 1, 1), FieldType.DATE),
            (datetime(2024, 1, 1, tzinfo=timezone(timedelta(hours=1))), FieldType.DATETIME),
            (["a"], FieldType.ARRAY),
            ({"a": 1}, FieldType.OBJECT),
        ],
    )
    def test_observe(self, value: object, expected: FieldType | None) -> None:
        assert observe(value) == expected  # type: ignore[arg-type]

    def test_threshold(self) -> None:
        assert observe("x" * 20, long_text_threshold=10) is FieldType.TEXT


class TestMergeTypes:
    def test_single(self) -> None:
        assert merge_types({FieldType.NUMBER}) is FieldType.NUMBER

    def test_string_and_text(self) -> None:
        assert merge_types({FieldType.STRING, FieldType.TEXT}) is FieldType.TEXT

    def test_date_and_datetime(self) -> None:
        assert merge_types({FieldType.DATE, FieldType.DATETIME}) is FieldType.DATETIME

    def test_mixed_falls_back_to_string(self) -> None:
        assert merge_types({FieldType.NUMBER, FieldType.BOOLEAN}) is FieldType.STRING

    def test_nothing_observed(self) -> None:
        assert merge_types(set()) is FieldType.STRING


class TestLooksLikeImagePath:
    @pytest.mark.parametrize("value", ["/img/a.jpg", "images/b.png", "cover.WEBP", "/static/x"])
    def test_yes(self, value: str) -> None:
        assert looks_like_image_path(value)

    def test_no(self) -> None:
        assert not looks_like_image_path("a sunny beach")


class TestInferSchema:
    def test_single_image_field_becomes_preview(self) -> None:
        docs = [
            _doc("a.md", cover="/img/a.jpg"),
            _doc("b.md", cover="/img/b.png"),
            _doc("c.md", cover="/img/c.jpg"),
        ]
        registry = infer_schema(docs)
        assert registry.field_type("cover") is FieldType.IMAGE
        assert registry.preview_image_field == "cover"
        assert registry.is_default is False
        assert registry.field_groups[0].name == IMAGES_GROUP
        assert registry.field_groups[0].fields == ["cover"]

    def test_alt_companions_join_image_group(self) -> None:
        docs = [_doc("a.md", cover="/img/a.jpg", cover_alt="A beach", coverAlt="x")]
        registry = infer_schema(docs)
        assert registry.field_groups[0].fields == ["cover", "cover_alt", "coverAlt"]
        assert registry.field_type("cover_alt") is FieldType.STRING

    def test_two_image_fields_leave_preview_unset(self) -> None:
        docs = [_doc("a.md", cover="/img/a.jpg", thumbnail="/img/t.jpg")]
        registry = infer_schema(docs)
        assert registry.preview_image_field is None
        assert registry.field_groups[0].fields == ["cover", "thumbnail"]

    def test_image_name_without_paths_is_string(self) -> None:
        registry = infer_schema([_doc("a.md", cover="a sunny beach")])
        assert registry.field_type("cover") is FieldType.STRING
        assert registry.field_groups == []

    def test_mixed_values_are_string(self) -> None:
        docs = [_doc("a.md", rating=5), _doc("b.md", rating="five")]
        assert infer_schema(docs).field_type("rating") is FieldType.STRING

    def test_null_only_field_is_string(self) -> None:
        assert infer_schema([_doc("a.md", subtitle=None)]).field_type("subtitle") is FieldType.STRING

    def test_labels_derived_from_names(self) -> None:
        registry = infer_schema([_doc("a.md", readingTime=4)])
        field = registry.get_field("readingTime")
        assert field is not None
        assert field.label == "Reading Time"

    def test_no_documents(self) -> None:
        registry = infer_schema([])
        assert registry.custom_fields == []
        assert registry.is_default is False

    def test_deterministic_regardless_of_order(self) -> None:
        docs = [
            _doc("b.md", rating=5, series="Hugo"),
            _doc("a.md", cover="/img/a.jpg"),
            _doc("x.md", DocumentKind.PAGE, about="me"),
            _doc("y.md", DocumentKind.DRAFT, summary="x" * 100),
        ]
        expected = infer_schema(docs).to_json_dict()
        shuffled = list(docs)
        random.Random(7).shuffle(shuffled)
        assert infer_schema(shuffled).to_json_dict() == expected
        assert infer_schema(reversed(docs)).to_json_dict() == expected
        # (kind, id) order: drafts, pages, then posts by id
        assert [f["name"] for f in expected["customFields"]] == [
            "summary",
            "about",
            "cover",
            "rating",
            "series",
        ]
