"""Rich Console factory and theme for sitectl output.

Consoles render to a StringIO buffer, so renderers stay plain
``ServiceResult -> str`` functions. In non-TTY environments (tests,
pipes) Rich disables color codes on its own.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

SITE_THEME = Theme(
    {
        "site.ok": "bold green",
        "site.error": "bold red",
        "site.warning": "bold yellow",
        "site.op": "bold cyan",
        "site.key": "dim",
        "site.id": "bold blue",
        "site.path": "dim",
        "site.title": "bold",
        "site.url": "underline",
        "site.kind.post": "green",
        "site.kind.page": "blue",
        "site.kind.draft": "yellow",
        "site.type": "magenta",
    }
)

_KIND_STYLES: dict[str, str] = {
    "post": "site.kind.post",
    "page": "site.kind.page",
    "draft": "site.kind.draft",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes.
        width: Override terminal width (keeps test output stable).
    """
    return Console(
        file=StringIO(),
        theme=SITE_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_kind(kind: str) -> str:
    return _KIND_STYLES.get(kind, "")
