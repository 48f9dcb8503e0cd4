"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO); the caller
gets the text back from :func:`render_result`. Renderers are picked by
``result.op``; unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from contactctl.output.console import create_console, get_output

if TYPE_CHECKING:
    from collections.abc import Callable

    from rich.console import Console

    from contactctl.services.result import ServiceResult

# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False, width: int = 120) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console(width=width)

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console)
        if verbose:
            _render_meta(console, result)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Minimal output for ``--quiet``: ids for listings, status line otherwise."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    if result.op == "duplicates":
        return "\n".join(" ".join(group["ids"]) for group in result.data.get("groups", []))

    items = result.data.get("items")
    if isinstance(items, list):
        return "\n".join(str(item.get("id", "")) for item in items)

    contact_id = result.data.get("id")
    return str(contact_id) if contact_id else f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult, suffix: str = "") -> None:
    line = Text.assemble(("OK", "contact.ok"), (f"  {result.op}", "contact.op"))
    if suffix:
        line.append(f"  {suffix}")
    console.print(line)


def _field(console: Console, key: str, value: Any) -> None:
    style = "contact.id" if key == "id" or key.endswith("_id") else ""
    console.print(Text.assemble((f"  {key}: ", "contact.key"), (str(value), style)))


def _display_name(item: dict[str, Any]) -> str:
    return f"{item.get('firstName', '')} {item.get('lastName', '')}".strip()


def _contact_table(
    items: list[dict[str, Any]],
    *,
    reasons: dict[str, list[str]] | None = None,
) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("ID", style="contact.id", no_wrap=True)
    table.add_column("Name", style="contact.name")
    table.add_column("Company")
    table.add_column("Phone", style="contact.phone")
    table.add_column("Email", style="contact.email")
    if reasons is not None:
        table.add_column("Matched on", style="contact.reason")

    for item in items:
        row = [
            str(item.get("id", "")),
            _display_name(item),
            str(item.get("company") or ""),
            ", ".join(item.get("phone", [])),
            ", ".join(item.get("email", [])),
        ]
        if reasons is not None:
            row.append(", ".join(reasons.get(str(item.get("id")), [])) or "seed")
        table.add_row(*row)
    return table


def _contact_detail(console: Console, item: dict[str, Any]) -> None:
    console.print(Text(f"  {_display_name(item)}", style="contact.name"))
    _field(console, "id", item.get("id", ""))
    for key in ("company", "address"):
        if item.get(key):
            _field(console, key, item[key])
    for phone in item.get("phone", []):
        _field(console, "phone", phone)
    for email in item.get("email", []):
        _field(console, "email", email)
    if item.get("notes"):
        console.print(Text("  notes:", style="contact.key"))
        for line in str(item["notes"]).splitlines():
            console.print(f"    {line}")
    _field(console, "created", item.get("createdAt", ""))
    _field(console, "updated", item.get("updatedAt", ""))


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for key, value in result.meta.items():
        if key == "telemetry":
            _render_span(console, value, indent=4)
        else:
            console.print(f"    {key}: {value}")


def _render_span(console: Console, span: dict[str, Any], indent: int) -> None:
    duration = span.get("duration_ms", 0.0)
    line = Text(" " * indent)
    line.append(f"{duration:>8.2f}ms", style="yellow" if duration > 100 else "dim")
    line.append(f"  {span.get('name', '?')}")
    annotations = span.get("annotations") or {}
    if annotations:
        line.append("  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")")
    console.print(line)
    for child in span.get("children", []):
        _render_span(console, child, indent + 4)


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text.assemble(("ERROR", "contact.error"), (f"  {result.op}", "contact.op"), " — ", msg)
    )
    if verbose and err is not None:
        _field(console, "code", err.code)
        for key, value in err.detail.items():
            _field(console, key, value)


# ── Op renderers ──────────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


def _render_contact_result(result: ServiceResult, console: Console) -> None:
    """add / update / delete — one contact touched (or a no-op)."""
    if result.data.get("changed") is False:
        _status_line(console, result, "no changes")
        return
    _status_line(console, result)
    contact = result.data.get("contact")
    if contact:
        _contact_detail(console, contact)
    else:
        _field(console, "id", result.data.get("id", ""))
    fields_changed = result.data.get("fields_changed")
    if fields_changed:
        _field(console, "fields_changed", ", ".join(fields_changed))


def _render_show(result: ServiceResult, console: Console) -> None:
    _contact_detail(console, result.data["contact"])


def _render_list(result: ServiceResult, console: Console) -> None:
    items = result.data.get("items", [])
    count = result.data.get("count", len(items))
    _status_line(console, result, f"{count} contact{'s' if count != 1 else ''}")
    if items:
        console.print(_contact_table(items))


def _render_duplicates(result: ServiceResult, console: Console) -> None:
    groups = result.data.get("groups", [])
    if not groups:
        _status_line(console, result, "no duplicates found")
        return
    count = len(groups)
    _status_line(console, result, f"{count} potential duplicate group{'s' if count != 1 else ''}")
    for group in groups:
        console.print()
        console.print(Text(f"  Group {group['index']}", style="contact.name"))
        console.print(_contact_table(group["items"], reasons=group.get("reasons", {})))


def _render_merge(result: ServiceResult, console: Console) -> None:
    if not result.data.get("changed"):
        _status_line(console, result, "no changes")
        return
    _status_line(console, result)
    _contact_detail(console, result.data["contact"])
    _field(console, "absorbed", ", ".join(result.data.get("absorbed_ids", [])))


_OP_RENDERERS: dict[str, Callable[[ServiceResult, Console], None]] = {
    "add": _render_contact_result,
    "update": _render_contact_result,
    "delete": _render_contact_result,
    "show": _render_show,
    "list": _render_list,
    "search": _render_list,
    "duplicates": _render_duplicates,
    "merge": _render_merge,
}
