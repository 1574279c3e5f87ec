"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). Renderers
are dispatched by ``result.op`` in :func:`render_result`; unknown ops
fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from sitectl.output.console import create_console, get_output, style_for_kind

if TYPE_CHECKING:
    from rich.console import Console

    from sitectl.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Minimal output for ``--quiet``: ids, URLs, or a status word."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    items = result.data.get("items")
    if isinstance(items, list):
        return "\n".join(_extract_id(item) for item in items if _extract_id(item))
    if result.op == "run_generator":
        return str(result.data.get("stdout", "")).rstrip("\n")
    for key in ("id", "url", "path"):
        if key in result.data:
            return str(result.data[key])
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _extract_id(item: Any) -> str:
    if isinstance(item, dict):
        for key in ("id", "url", "name"):
            val = item.get(key)
            if val is not None:
                return str(val)
    return ""


def _status_line(console: Console, result: ServiceResult) -> None:
    label = Text("OK", style="site.ok")
    op = Text(f"  {result.op}", style="site.op")
    console.print(label, op, end="")
    console.print()


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="site.key")
    if key == "id" or key.endswith("_id"):
        v = Text(str(value), style="site.id")
    elif key == "path":
        v = Text(str(value), style="site.path")
    elif key == "title":
        v = Text(str(value), style="site.title")
    elif key == "url":
        v = Text(str(value), style="site.url")
    elif isinstance(value, (dict, list)):
        v = Text(json.dumps(value, separators=(",", ":"), ensure_ascii=False))
    else:
        v = Text(str(value))
    console.print(Text.assemble(k, v))


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        console.print(f"    {k}: {v}", markup=False)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    label = Text("ERROR", style="site.error")
    op = Text(f"  {result.op}", style="site.op")
    code = Text(f" [{err.code}]" if err else "", style="dim")
    console.print(label, op, code, Text(" — "), Text(msg))
    if err and err.detail:
        if result.op == "run_generator":
            stderr = str(err.detail.get("stderr", "")).rstrip()
            if stderr:
                console.print(stderr, markup=False)
        elif verbose:
            console.print(Text("  detail:", style="dim"))
            for k, v in err.detail.items():
                console.print(f"    {k}: {v}", markup=False)


# ── Mutation renderer ─────────────────────────────────────────────────


_MUTATION_KEYS = (
    "id",
    "kind",
    "old_id",
    "old_kind",
    "title",
    "path",
    "field",
    "value",
    "removed",
    "tags",
    "categories",
    "url",
)


def _render_mutation(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render create/delete/move/edit results."""
    _status_line(console, result)
    for key in _MUTATION_KEYS:
        if key in result.data:
            _field(console, key, result.data[key])
    if verbose:
        _render_meta(console, result)


# ── Content renderers ─────────────────────────────────────────────────


def _render_document_table(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="site.id", no_wrap=True)
    table.add_column("Title", style="site.title")
    table.add_column("Date")
    table.add_column("Tags")
    if verbose:
        table.add_column("Modified", style="dim")

    for item in items:
        title = Text(str(item.get("title", "")))
        if item.get("error"):
            title = Text(f"{title} (unreadable)", style="site.error")
        elif item.get("draft"):
            title = Text(f"{title} (draft)", style="site.kind.draft")
        row: list[Text] = [
            Text(str(item.get("id", ""))),
            title,
            Text(str(item.get("date") or "")[:10]),
            Text(", ".join(item.get("tags") or [])),
        ]
        if verbose:
            row.append(Text(str(item.get("modified_at") or "")))
        table.add_row(*row)

    console.print(table)
    count = result.meta.get("count", len(items)) if result.meta else len(items)
    console.print(f"\n{count} {result.data.get('kind', 'document')}(s)")


def _render_document(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a document as a panel: known fields, grouped custom fields, body."""
    d = result.data
    header: dict[str, Any] = d.get("header", {})
    custom: dict[str, Any] = header.get("custom_fields", {})

    lines: list[str] = []
    for key, value in header.items():
        if key in ("title", "custom_fields") or value in (None, [], ""):
            continue
        shown = ", ".join(map(str, value)) if isinstance(value, list) else value
        lines.append(f"{key}: {shown}")

    for group in d.get("groups", []):
        present = [name for name in group["fields"] if name in custom]
        if not present:
            continue
        lines.append("")
        lines.append(f"[{group['label']}]")
        for name in present:
            value = custom[name]
            if isinstance(value, (dict, list)):
                value = json.dumps(value, ensure_ascii=False)
            lines.append(f"  {name}: {value}")

    content = "\n".join(lines)
    body = d.get("body", "")
    if body.strip():
        content += f"\n\n{body.strip()}"

    title = f"{d.get('id', '?')} — {d.get('title', 'Untitled')}"
    style = style_for_kind(str(d.get("kind", "")))
    console.print(
        Panel(Text(content), title=Text(title), border_style=style or "dim", expand=False)
    )
    if verbose:
        _field(console, "path", d.get("path", ""))
        _field(console, "modified_at", d.get("modified_at", ""))


# ── Schema renderers ──────────────────────────────────────────────────


def _render_schema(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "version", d.get("version", ""))
    _field(console, "preview_image_field", d.get("previewImageField") or "-")
    _field(console, "default", d.get("isDefault", False))

    fields = d.get("customFields", [])
    if fields:
        console.print()
        table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
        table.add_column("Name", style="site.id", no_wrap=True)
        table.add_column("Label", style="site.title")
        table.add_column("Type", style="site.type")
        table.add_column("Description")
        for fs in fields:
            table.add_row(
                fs["name"],
                fs.get("label") or "",
                fs.get("type", "string"),
                fs.get("description") or "",
            )
        console.print(table)

    for group in d.get("fieldGroups", []):
        console.print(
            f"  group {group['name']}: {', '.join(group.get('fields', []))}", markup=False
        )
    if verbose:
        _render_meta(console, result)


def _render_editors(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Type", style="site.type", no_wrap=True)
    table.add_column("Widget")
    table.add_column("Value")
    table.add_column("Rows", justify="right")
    for row in result.data.get("types", []):
        table.add_row(row["type"], row["widget"], row["value_kind"], str(row["rows"] or ""))
    console.print(table)

    fields = result.data.get("fields", [])
    if fields:
        console.print()
        ftable = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
        ftable.add_column("Field", style="site.id", no_wrap=True)
        ftable.add_column("Label", style="site.title")
        ftable.add_column("Widget")
        ftable.add_column("Placeholder", style="dim")
        for row in fields:
            ftable.add_row(row["name"], row["label"], row["widget"], row.get("placeholder") or "")
        console.print(ftable)


# ── Asset / generator renderers ───────────────────────────────────────


def _render_image_table(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("URL", style="site.url", no_wrap=True)
    table.add_column("Size", justify="right")
    table.add_column("Added", style="dim")
    for item in items:
        table.add_row(item["url"], f"{item['size']:,}", str(item["created_at"])[:19])
    console.print(table)
    console.print(f"\n{len(items)} image(s)")


def _render_generator(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    stdout = str(result.data.get("stdout", "")).rstrip()
    if stdout:
        console.print(stdout, markup=False, highlight=False)
    if verbose:
        _field(console, "command", " ".join(result.data.get("command", [])))
        _field(console, "exit_code", result.data.get("exit_code", 0))


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Content
    "list_documents": _render_document_table,
    "show_document": _render_document,
    "create_document": _render_mutation,
    "delete_document": _render_mutation,
    "rename_document": _render_mutation,
    "move_document": _render_mutation,
    "set_field": _render_mutation,
    "unset_field": _render_mutation,
    "add_term": _render_mutation,
    "remove_term": _render_mutation,
    # Schema
    "show_schema": _render_schema,
    "infer_schema": _render_schema,
    "schema_editors": _render_editors,
    # Assets
    "list_images": _render_image_table,
    "add_image": _render_mutation,
    "remove_image": _render_mutation,
    # Generator
    "run_generator": _render_generator,
}
