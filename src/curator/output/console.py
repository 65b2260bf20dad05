"""Rich console and theme used by the human renderers.

Renderers print into an in-memory console and hand back the text, so
``format_result`` stays a plain ``ServiceResult -> str`` function. Rich
drops color codes on its own when the buffer is not a terminal.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

# Outcome of one note in a filing batch or one operation in an undo.
_ACTION_COLORS: dict[str, str] = {
    "filed": "green",
    "queued": "yellow",
    "skipped": "dim",
    "failed": "bold red",
}
# Undo restores a note, so it reads as a success.
_ACTION_ALIASES: dict[str, str] = {"undone": "filed"}

CURATOR_THEME = Theme(
    {
        "curator.ok": "bold green",
        "curator.error": "bold red",
        "curator.warning": "bold yellow",
        "curator.op": "bold cyan",
        "curator.key": "dim",
        "curator.id": "bold blue",
        "curator.path": "dim",
        "curator.score": "magenta",
        **{f"curator.action.{name}": color for name, color in _ACTION_COLORS.items()},
    }
)


def create_console(*, no_color: bool = False, width: int = 120) -> Console:
    """A buffer-backed console with the curator theme.

    Tests pass ``no_color=True`` and a fixed *width* so table layout is
    stable.
    """
    return Console(
        file=StringIO(),
        theme=CURATOR_THEME,
        no_color=no_color,
        highlight=False,
        width=width,
    )


def get_output(console: Console) -> str:
    buffer = console.file
    assert isinstance(buffer, StringIO)
    return buffer.getvalue()


def style_for_action(action: str) -> str:
    """Theme style for a batch or undo outcome, or ``""`` if unknown."""
    action = _ACTION_ALIASES.get(action, action)
    return f"curator.action.{action}" if action in _ACTION_COLORS else ""
