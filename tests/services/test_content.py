"""Tests for ContentService — document operations as ServiceResults."""

from __future__ import annotations

import json

import pytest

from sitectl.domain.schema import FieldSchema, FieldType, SchemaRegistry
from sitectl.domain.types import DocumentKind
from sitectl.infrastructure.project import ProjectContext
from sitectl.infrastructure.repository import ContentRepository
from sitectl.services.content import ContentService
from tests.conftest import write_doc

SCENARIO = '---\ntitle: "Hi"\ndate: "2024-01-01"\ntags: [a, b]\nrating: 5\n---\nBody\n'


@pytest.fixture
def service(project: ProjectContext, repository: ContentRepository) -> ContentService:
    return ContentService(project, repository)


class TestListDocuments:
    def test_lists_with_count(self, project: ProjectContext, service: ContentService) -> None:
        write_doc(project, DocumentKind.POST, "hi.md", SCENARIO)
        result = service.list_documents(DocumentKind.POST)
        assert result.ok
        assert result.op == "list_documents"
        assert result.meta == {"count": 1}
        item = result.data["items"][0]
        assert item["id"] == "hi.md"
        assert item["title"] == "Hi"
        assert item["tags"] == ["a", "b"]
        assert item["date"].startswith("2024-01-01T00:00:00")

    def test_broken_files_become_warnings(
        self, project: ProjectContext, service: ContentService
    ) -> None:
        write_doc(project, DocumentKind.POST, "bad.md", "---\nunterminated\n")
        result = service.list_documents(DocumentKind.POST)
        assert result.ok
        assert result.data["items"][0]["error"]
        assert result.warnings[0].startswith("bad.md: ")

    def test_json_serializable(self, project: ProjectContext, service: ContentService) -> None:
        write_doc(project, DocumentKind.POST, "hi.md", SCENARIO)
        json.loads(service.list_documents(DocumentKind.POST).model_dump_json())


class TestShow:
    def test_show(self, project: ProjectContext, service: ContentService) -> None:
        write_doc(project, DocumentKind.POST, "hi.md", SCENARIO)
        result = service.show(DocumentKind.POST, "hi.md")
        assert result.ok
        assert result.data["title"] == "Hi"
        assert result.data["header"]["custom_fields"] == {"rating": 5}
        assert result.data["body"] == "Body\n"
        assert result.data["groups"] == [
            {"name": "custom", "label": "Custom", "fields": ["rating"], "collapsed": False}
        ]

    def test_not_found(self, service: ContentService) -> None:
        result = service.show(DocumentKind.POST, "missing.md")
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"

    def test_invalid_id(self, service: ContentService) -> None:
        result = service.show(DocumentKind.POST, "../../etc/passwd")
        assert result.error is not None
        assert result.error.code == "INVALID_ID"

    def test_malformed(self, project: ProjectContext, service: ContentService) -> None:
        write_doc(project, DocumentKind.POST, "bad.md", "+++\ntitle = 'x'\n+++\n")
        result = service.show(DocumentKind.POST, "bad.md")
        assert result.error is not None
        assert result.error.code == "MALFORMED_HEADER"


class TestLifecycle:
    def test_create(self, service: ContentService) -> None:
        result = service.create(DocumentKind.POST, "My Post")
        assert result.ok
        assert result.data["id"] == "my-post.md"
        assert result.data["kind"] == "post"

    def test_create_duplicate(self, service: ContentService) -> None:
        service.create(DocumentKind.POST, "My Post")
        result = service.create(DocumentKind.POST, "My Post")
        assert result.error is not None
        assert result.error.code == "DUPLICATE_SLUG"

    def test_delete(self, service: ContentService) -> None:
        service.create(DocumentKind.POST, "Gone")
        result = service.delete(DocumentKind.POST, "gone.md")
        assert result.ok
        assert service.show(DocumentKind.POST, "gone.md").ok is False

    def test_rename(self, service: ContentService) -> None:
        service.create(DocumentKind.POST, "Old")
        result = service.rename(DocumentKind.POST, "old.md", "new")
        assert result.ok
        assert result.data["id"] == "new.md"
        assert result.data["old_id"] == "old.md"

    def test_move(self, service: ContentService) -> None:
        service.create(DocumentKind.DRAFT, "Idea")
        result = service.move(DocumentKind.DRAFT, "idea.md", DocumentKind.POST)
        assert result.ok
        assert result.data["kind"] == "post"
        assert result.data["old_kind"] == "draft"


class TestSetField:
    def test_custom_number(self, project: ProjectContext, service: ContentService) -> None:
        write_doc(project, DocumentKind.POST, "hi.md", SCENARIO)
        result = service.set_field(DocumentKind.POST, "hi.md", "rating", "6")
        assert result.ok
        assert result.data["value"] == 6
        text = (project.content_root(DocumentKind.POST) / "hi.md").read_text(encoding="utf-8")
        assert text == '---\ntitle: "Hi"\ndate: "2024-01-01"\ntags: [a, b]\nrating: 6\n---\nBody\n'

    def test_known_string_keeps_text(self, project: ProjectContext, service: ContentService) -> None:
        write_doc(project, DocumentKind.POST, "hi.md", SCENARIO)
        result = service.set_field(DocumentKind.POST, "hi.md", "title", "2024")
        assert result.ok
        assert result.data["value"] == "2024"

    def test_tags_from_comma_list(self, project: ProjectContext, service: ContentService) -> None:
        write_doc(project, DocumentKind.POST, "hi.md", SCENARIO)
        result = service.set_field(DocumentKind.POST, "hi.md", "tags", "hugo, go")
        assert result.data["value"] == ["hugo", "go"]

    def test_date(self, project: ProjectContext, service: ContentService) -> None:
        write_doc(project, DocumentKind.POST, "hi.md", SCENARIO)
        result = service.set_field(DocumentKind.POST, "hi.md", "date", "2024-05-01T10:00:00+02:00")
        assert result.data["value"] == "2024-05-01T10:00:00+02:00"

    def test_wrong_known_shape(self, project: ProjectContext, service: ContentService) -> None:
        write_doc(project, DocumentKind.POST, "hi.md", SCENARIO)
        result = service.set_field(DocumentKind.POST, "hi.md", "date", "next week")
        assert result.error is not None
        assert result.error.code == "FIELD_TYPE"

    def test_schema_typed_text_field(self, project: ProjectContext) -> None:
        registry = SchemaRegistry(custom_fields=[FieldSchema(name="subtitle", type=FieldType.TEXT)])
        service = ContentService(project, ContentRepository(project, registry))
        write_doc(project, DocumentKind.POST, "hi.md", SCENARIO)
        result = service.set_field(DocumentKind.POST, "hi.md", "subtitle", "42")
        assert result.data["value"] == "42"

    def test_schema_mismatch(self, project: ProjectContext) -> None:
        registry = SchemaRegistry(custom_fields=[FieldSchema(name="rating", type=FieldType.NUMBER)])
        service = ContentService(project, ContentRepository(project, registry))
        write_doc(project, DocumentKind.POST, "hi.md", SCENARIO)
        result = service.set_field(DocumentKind.POST, "hi.md", "rating", "lots")
        assert result.error is not None
        assert result.error.code == "FIELD_TYPE"

    def test_list_value(self, project: ProjectContext, service: ContentService) -> None:
        write_doc(project, DocumentKind.POST, "hi.md", SCENARIO)
        result = service.set_field(DocumentKind.POST, "hi.md", "gallery", "[/a.png, /b.png]")
        assert result.data["value"] == ["/a.png", "/b.png"]


class TestUnsetField:
    def test_custom(self, project: ProjectContext, service: ContentService) -> None:
        write_doc(project, DocumentKind.POST, "hi.md", SCENARIO)
        assert service.unset_field(DocumentKind.POST, "hi.md", "rating").ok
        shown = service.show(DocumentKind.POST, "hi.md")
        assert shown.data["header"]["custom_fields"] == {}

    def test_known_optional(self, project: ProjectContext, service: ContentService) -> None:
        write_doc(project, DocumentKind.POST, "hi.md", SCENARIO)
        assert service.unset_field(DocumentKind.POST, "hi.md", "tags").ok
        text = (project.content_root(DocumentKind.POST) / "hi.md").read_text(encoding="utf-8")
        assert "tags" not in text

    def test_required(self, service: ContentService) -> None:
        result = service.unset_field(DocumentKind.POST, "hi.md", "title")
        assert result.error is not None
        assert result.error.code == "REQUIRED_FIELD"

    def test_absent(self, project: ProjectContext, service: ContentService) -> None:
        write_doc(project, DocumentKind.POST, "hi.md", SCENARIO)
        result = service.unset_field(DocumentKind.POST, "hi.md", "nope")
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"


class TestTerms:
    def test_add_and_remove_tag(self, project: ProjectContext, service: ContentService) -> None:
        write_doc(project, DocumentKind.POST, "hi.md", SCENARIO)
        added = service.add_term(DocumentKind.POST, "hi.md", "c", index=0)
        assert added.data["tags"] == ["c", "a", "b"]
        removed = service.remove_term(DocumentKind.POST, "hi.md", 1)
        assert removed.data["removed"] == "a"
        assert removed.data["tags"] == ["c", "b"]

    def test_category(self, project: ProjectContext, service: ContentService) -> None:
        write_doc(project, DocumentKind.POST, "hi.md", SCENARIO)
        result = service.add_term(DocumentKind.POST, "hi.md", "Go", field="categories")
        assert result.data["categories"] == ["Go"]

    def test_bad_index(self, project: ProjectContext, service: ContentService) -> None:
        write_doc(project, DocumentKind.POST, "hi.md", SCENARIO)
        result = service.remove_term(DocumentKind.POST, "hi.md", 9)
        assert result.error is not None
        assert result.error.code == "INVALID_ARGUMENT"

    def test_empty_term(self, project: ProjectContext, service: ContentService) -> None:
        write_doc(project, DocumentKind.POST, "hi.md", SCENARIO)
        result = service.add_term(DocumentKind.POST, "hi.md", "  ")
        assert result.error is not None
        assert result.error.code == "FIELD_TYPE"
