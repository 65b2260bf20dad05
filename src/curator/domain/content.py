"""Note documents and the YAML frontmatter codec.

A note is markdown text with an optional leading YAML block delimited by
``---`` lines. The codec is lossless for the value types the curator
writes: strings, booleans, integers, floats, string lists, and one level
of nested mappings. Key order is preserved as written.

Frontmatter is treated as an immutable value: helpers that change it
return a fresh mapping and never mutate their input.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from io import StringIO
from typing import Any

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from curator.errors import FrontmatterError

_FENCE = "---"


def _new_yaml() -> YAML:
    """Round-trip YAML instance; one per call, the object keeps emitter state."""
    yaml = YAML()
    yaml.preserve_quotes = True
    yaml.default_flow_style = False
    yaml.width = 4096
    return yaml


@dataclass(frozen=True)
class NoteDocument:
    """A parsed note: its path, frontmatter, body, and raw text."""

    path: str
    frontmatter: Mapping[str, Any] = field(default_factory=dict)
    body: str = ""
    content: str = ""

    @classmethod
    def from_content(cls, path: str, content: str) -> NoteDocument:
        fm, body = parse_frontmatter(content)
        return cls(path=path, frontmatter=fm, body=body, content=content)


def _split(content: str) -> tuple[str, str] | None:
    """Split *content* into ``(yaml_block, body)``, or None without a fence."""
    lines = content.replace("\r\n", "\n").split("\n")
    if lines[0].strip() != _FENCE:
        return None
    close = next((i for i, line in enumerate(lines) if i and line.strip() == _FENCE), None)
    if close is None:
        return None
    return "\n".join(lines[1:close]), "\n".join(lines[close + 1 :])


def parse_frontmatter(content: str) -> tuple[dict[str, Any], str]:
    """Read the leading YAML block of a note.

    The block opens with a ``---`` first line and closes at the next
    ``---`` line; what follows is returned as the body, unchanged. Text
    without a closed block, or whose block is not a mapping, comes back
    as ``({}, content)``.

    Raises:
        FrontmatterError: The block is not valid YAML.
    """
    parts = _split(content)
    if parts is None:
        return {}, content
    yaml_block, body = parts
    try:
        loaded = _new_yaml().load(yaml_block)
    except YAMLError as exc:
        raise FrontmatterError(f"Invalid frontmatter: {exc}") from exc
    if not isinstance(loaded, Mapping):
        return {}, content
    return _plain(loaded), body


def render_frontmatter(frontmatter: Mapping[str, Any], body: str) -> str:
    """Inverse of :func:`parse_frontmatter`; an empty mapping gives just *body*."""
    if not frontmatter:
        return body
    out = StringIO()
    _new_yaml().dump(_plain(frontmatter), out)
    return f"{_FENCE}\n{out.getvalue()}{_FENCE}\n{body}"


def _plain(value: Any) -> Any:
    """Convert ruamel round-trip containers into plain dicts and lists."""
    if isinstance(value, Mapping):
        return {str(k): _plain(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_plain(v) for v in value]
    if isinstance(value, str):
        return str(value)
    return value


def with_updates(
    frontmatter: Mapping[str, Any],
    updates: Mapping[str, Any] | None = None,
    *,
    remove: tuple[str, ...] = (),
) -> dict[str, Any]:
    """Return a copy of *frontmatter* with *updates* applied and *remove* keys dropped."""
    result = {k: v for k, v in frontmatter.items() if k not in remove}
    if updates:
        result.update(updates)
    return result
