"""Human-readable rendering of service results.

One function per operation draws onto a buffer-backed Rich console;
:func:`render_result` picks it by ``result.op`` and returns the text.
Operations without a dedicated renderer print their data as
``key: value`` lines.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from curator.output.console import create_console, get_output, style_for_action

if TYPE_CHECKING:
    from rich.console import Console

    from curator.services.result import ServiceResult

# Data keys whose value is the one thing ``--quiet`` prints, in order.
_QUIET_KEYS = ("session_id", "path")


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Draw *result* and return it as text.

    Inside CliRunner or a pipe Rich sees no terminal and emits no ANSI codes.
    """
    console = create_console()
    if result.ok:
        draw = _OP_RENDERERS.get(result.op, _render_generic)
    else:
        draw = _render_error
    draw(result, console, verbose=verbose)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """One line per key value: a session id, a note path, or ``OK: <op>``."""
    if not result.ok:
        return f"ERROR: {result.op} — {_error_message(result)}"

    sessions = result.data.get("sessions")
    if isinstance(sessions, list):
        return "\n".join(str(s.get("session_id", "")) for s in sessions)
    key = next((k for k in _QUIET_KEYS if k in result.data), None)
    return f"OK: {result.op}" if key is None else str(result.data[key])


def _error_message(result: ServiceResult) -> str:
    return result.error.message if result.error else "Unknown error"


# ── Building blocks ───────────────────────────────────────────────────


def _heading(console: Console, result: ServiceResult) -> None:
    console.print(Text.assemble(("OK", "curator.ok"), (f"  {result.op}", "curator.op")))


def _value_style(key: str) -> str:
    if key.endswith("_id"):
        return "curator.id"
    if key == "path" or key.endswith(("_path", "_folder")):
        return "curator.path"
    return ""


def _field(console: Console, key: str, value: Any) -> None:
    console.print(
        Text.assemble((f"  {key}: ", "curator.key"), (str(value), _value_style(key)))
    )


def _action(action: str) -> Text:
    return Text(action, style=style_for_action(action))


# ── Errors ────────────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    console.print(
        Text.assemble(
            ("ERROR", "curator.error"),
            (f"  {result.op}", "curator.op"),
            f" — {_error_message(result)}",
        )
    )
    detail = result.error.detail if result.error else {}
    if verbose and detail:
        console.print(Text("  detail:", style="dim"))
        for key, value in detail.items():
            console.print(f"    {key}: {value}", markup=False)


# ── Filing renderers ──────────────────────────────────────────────────


def _render_file_batch(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render a filing batch: counters, then one row per note."""
    d = result.data
    _heading(console, result)
    _field(console, "session_id", d.get("session_id", ""))
    if d.get("dry_run"):
        console.print(Text("  dry run: nothing was written", style="curator.warning"))
    if d.get("message"):
        _field(console, "message", d["message"])

    details = d.get("details", [])
    if details:
        table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
        table.add_column("Note", style="curator.path")
        table.add_column("Action")
        table.add_column("Target", style="curator.path")
        table.add_column("Confidence", style="curator.score", justify="right")
        if verbose:
            table.add_column("Source", style="dim")
            table.add_column("Reason")

        for item in details:
            confidence = item.get("confidence")
            row: list[Any] = [
                str(item.get("path", "")),
                _action(str(item.get("action", ""))),
                str(item.get("target_path", "")),
                f"{confidence:.2f}" if isinstance(confidence, (int, float)) else "",
            ]
            if verbose:
                row.append(str(item.get("folder_source", "")))
                row.append(str(item.get("reason") or item.get("error") or ""))
            table.add_row(*row)
        console.print()
        console.print(table)

    console.print(
        f"\n{d.get('processed', 0)} processed: "
        f"{d.get('filed', 0)} filed, {d.get('queued', 0)} queued, "
        f"{d.get('skipped', 0)} skipped, {d.get('failed', 0)} failed"
    )


def _render_undo(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _heading(console, result)
    _field(console, "session_id", d.get("session_id", ""))
    _field(console, "undone", d.get("undone", 0))
    _field(console, "failed", d.get("failed", 0))

    for item in d.get("details", []):
        status = str(item.get("status", ""))
        if status == "failed" or verbose:
            line = Text("  ")
            line.append(status, style=style_for_action(status))
            line.append(f" {item.get('target_path', '')} -> {item.get('path', '')}")
            if item.get("error"):
                line.append(f": {item['error']}", style="curator.error")
            console.print(line)


def _render_sessions(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render the undoable session listing."""
    sessions = result.data.get("sessions", [])
    if not sessions:
        console.print("No undoable filing sessions.")
        return

    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Session", style="curator.id", no_wrap=True)
    table.add_column("Started")
    table.add_column("Ops", justify="right")
    if verbose:
        table.add_column("Actions", style="dim")

    for session in sessions:
        row = [
            str(session.get("session_id", "")),
            str(session.get("start_time", "")),
            str(session.get("operation_count", 0)),
        ]
        if verbose:
            row.append(", ".join(session.get("actions", [])))
        table.add_row(*row)

    console.print(table)
    console.print(f"\n{result.data.get('count', len(sessions))} sessions")


def _render_session(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _heading(console, result)
    _field(console, "session_id", d.get("session_id", ""))
    _field(console, "start_time", d.get("start_time", ""))
    operations = d.get("operations", [])
    _field(console, "operations", len(operations))
    for operation in operations:
        console.print(
            f"    {operation.get('action', '')}: "
            f"{operation.get('original_path', '')} -> {operation.get('target_path', '')}"
        )


# ── Learning renderers ────────────────────────────────────────────────


def _render_hints(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _heading(console, result)
    suggested = d.get("suggested_folder")
    _field(console, "suggested_folder", suggested or "(none)")
    _field(console, "confidence", f"{d.get('confidence', 0.0):.2f}")

    scores = d.get("scores", {})
    if scores and verbose:
        table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
        table.add_column("Folder", style="curator.path")
        table.add_column("Score", style="curator.score", justify="right")
        for folder, score in sorted(scores.items(), key=lambda kv: kv[1], reverse=True):
            table.add_row(folder, f"{score:.2f}")
        console.print()
        console.print(table)


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _heading(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, _json.dumps(value, separators=(",", ":")))
        else:
            _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    # Filing
    "file_batch": _render_file_batch,
    # History
    "undo_session": _render_undo,
    "recent_sessions": _render_sessions,
    "get_session": _render_session,
    "latest_undoable": _render_session,
    # Learning
    "folder_hints": _render_hints,
}
