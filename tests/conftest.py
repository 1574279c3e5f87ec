"""Shared pytest fixtures and test helpers for sitectl tests."""

from __future__ import annotations

import os
from pathlib import Path

import pytest
from click.testing import CliRunner

from sitectl.domain.types import DocumentKind
from sitectl.infrastructure.project import ProjectContext
from sitectl.infrastructure.repository import ContentRepository


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Temporary Hugo project with the stock content layout.

    This is the single source of truth for the project directory layout.
    All project-related fixtures build on this.
    """
    (tmp_path / "hugo.toml").write_text('title = "Test site"\n', encoding="utf-8")
    (tmp_path / "content" / "posts").mkdir(parents=True)
    (tmp_path / "content" / "drafts").mkdir(parents=True)
    (tmp_path / "static" / "images").mkdir(parents=True)
    return tmp_path


@pytest.fixture
def project(project_root: Path) -> ProjectContext:
    return ProjectContext(root=project_root)


@pytest.fixture
def repository(project: ProjectContext) -> ContentRepository:
    return ContentRepository(project)


@pytest.fixture
def _isolated_project(project_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to a temp project root so the CLI operates on it.

    Use via ``@pytest.mark.usefixtures("_isolated_project")`` on command
    test classes.
    """
    monkeypatch.delenv("SITECTL_CONFIG", raising=False)
    monkeypatch.chdir(project_root)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def write_doc(
    project: ProjectContext,
    kind: DocumentKind,
    doc_id: str,
    text: str,
    *,
    mtime: float | None = None,
) -> Path:
    """Write raw file text under the content root of *kind*."""
    path = project.content_root(kind) / doc_id
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(text.encode("utf-8"))
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path
