"""Tests for output mode selection (JSON, quiet, rich)."""

from __future__ import annotations

import json
from typing import Any

from sitectl.output.formatters import OutputSettings, format_result
from sitectl.services.result import ServiceResult


def _ok(op: str = "create_document", **data: Any) -> ServiceResult:
    return ServiceResult(ok=True, op=op, data=data or {"id": "hello.md", "title": "Hello"})


def _err(op: str = "show_document") -> ServiceResult:
    return ServiceResult.failure(op, "NOT_FOUND", "No post with id 'x.md'")


class TestJsonMode:
    def test_full_model(self) -> None:
        out = format_result(_ok(), settings=OutputSettings(json_output=True))
        parsed = json.loads(out)
        assert parsed["ok"] is True
        assert parsed["op"] == "create_document"
        assert parsed["data"]["id"] == "hello.md"
        assert parsed["error"] is None

    def test_error(self) -> None:
        parsed = json.loads(format_result(_err(), settings=OutputSettings(json_output=True)))
        assert parsed["ok"] is False
        assert parsed["error"]["code"] == "NOT_FOUND"

    def test_json_wins_over_quiet(self) -> None:
        out = format_result(_ok(), settings=OutputSettings(json_output=True, quiet=True))
        assert json.loads(out)["ok"] is True


class TestQuietMode:
    def test_id(self) -> None:
        assert format_result(_ok(), settings=OutputSettings(quiet=True)) == "hello.md"

    def test_list_ids(self) -> None:
        result = _ok("list_documents", kind="post", items=[{"id": "a.md"}, {"id": "b.md"}])
        assert format_result(result, settings=OutputSettings(quiet=True)) == "a.md\nb.md"

    def test_url(self) -> None:
        result = _ok("add_image", url="/images/a.png", source="/tmp/a.png")
        assert format_result(result, settings=OutputSettings(quiet=True)) == "/images/a.png"

    def test_error(self) -> None:
        out = format_result(_err(), settings=OutputSettings(quiet=True))
        assert out.startswith("ERROR: show_document")

    def test_no_id_falls_back_to_status(self) -> None:
        result = _ok("schema_editors", types=[], fields=[])
        assert format_result(result, settings=OutputSettings(quiet=True)) == "OK: schema_editors"


class TestRichMode:
    def test_default_settings(self) -> None:
        out = format_result(_ok())
        assert "OK" in out
        assert "create_document" in out
        assert "hello.md" in out

    def test_error(self) -> None:
        out = format_result(_err())
        assert "ERROR" in out
        assert "NOT_FOUND" in out
        assert "No post with id 'x.md'" in out
