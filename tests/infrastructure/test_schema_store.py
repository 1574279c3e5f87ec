"""Tests for loading and saving the project schema config."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from sitectl.domain.errors import SchemaLoadError
from sitectl.domain.schema import FieldGroup, FieldSchema, FieldType, SchemaRegistry
from sitectl.infrastructure.schema_store import (
    load_registry,
    load_registry_or_default,
    save_registry,
)


def _write(path: Path, data: object) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data) if not isinstance(data, str) else data, encoding="utf-8")
    return path


class TestLoadRegistry:
    def test_missing_file_is_default(self, tmp_path: Path) -> None:
        registry = load_registry(tmp_path / "nope.json")
        assert registry.is_default is True
        assert registry.custom_fields == []

    def test_valid_file(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path / "cfg.json",
            {
                "version": "1.0",
                "previewImageField": "cover",
                "customFields": [{"name": "cover", "type": "image"}],
            },
        )
        registry = load_registry(path)
        assert registry.is_default is False
        assert registry.preview_image_field == "cover"

    def test_stored_default_flag_ignored(self, tmp_path: Path) -> None:
        path = _write(
            tmp_path / "cfg.json",
            {
                "version": "1.0",
                "isDefault": True,
                "customFields": [{"name": "rating", "type": "number"}],
            },
        )
        registry = load_registry(path)
        assert registry.is_default is False
        assert [f.name for f in registry.custom_fields] == ["rating"]

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "cfg.json", "{not json")
        with pytest.raises(SchemaLoadError, match="Invalid JSON"):
            load_registry(path)

    def test_invalid_shape(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "cfg.json", {"customFields": [{"name": "a"}, {"name": "a"}]})
        with pytest.raises(SchemaLoadError, match="Invalid schema config"):
            load_registry(path)

    def test_or_default_keeps_error(self, tmp_path: Path) -> None:
        path = _write(tmp_path / "cfg.json", "[]")
        registry = load_registry_or_default(path)
        assert registry.is_default is True
        assert len(registry.load_warnings) == 1
        assert "Invalid schema config" in registry.load_warnings[0]


class TestSaveRegistry:
    def test_round_trip(self, tmp_path: Path) -> None:
        path = tmp_path / ".sitectl" / "frontmatter-config.json"
        registry = SchemaRegistry(
            preview_image_field="cover",
            custom_fields=[
                FieldSchema(name="cover", label="Cover", type=FieldType.IMAGE),
                FieldSchema(name="summary", type=FieldType.TEXT),
            ],
            field_groups=[FieldGroup(name="images", label="Images", fields=["cover"])],
            is_default=True,
        )
        save_registry(path, registry)
        assert registry.is_default is False

        on_disk = json.loads(path.read_text(encoding="utf-8"))
        assert on_disk["previewImageField"] == "cover"
        assert on_disk["customFields"][1] == {"name": "summary", "type": "text"}
        assert "isDefault" not in on_disk
        assert path.read_text(encoding="utf-8").startswith('{\n  "version": "1.0"')

        assert load_registry(path) == registry
