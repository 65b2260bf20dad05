"""Filing rules — confidence gate, target paths, and metadata rewrites.

Pure functions only. The filing service supplies timestamps and store
lookups; everything here is deterministic given its inputs.

Confidence labels map to fixed numbers (high 0.9, medium 0.6, low 0.3,
unknown 0.5). These constants are tunable, not derived from any
measurement.
"""

from __future__ import annotations

import math
import posixpath
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field, field_validator

from curator.domain.content import with_updates
from curator.domain.paths import basename, join, normalize_path

CONFIDENCE_LEVELS: dict[str, float] = {
    "high": 0.9,
    "medium": 0.6,
    "low": 0.3,
}
DEFAULT_CONFIDENCE = 0.5

SUGGESTIONS_KEY = "ai_suggestions"
RELATED_HEADING = "## Related Notes"


class AISuggestion(BaseModel):
    """The ``ai_suggestions`` block written by note analysis."""

    model_config = {"frozen": True}

    folder: str | None = None
    tags: list[str] = Field(default_factory=list)
    related: list[str] = Field(default_factory=list)
    summary: str | None = None
    confidence: Any = None

    @field_validator("tags", "related", mode="before")
    @classmethod
    def _coerce_list(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [value] if value.strip() else []
        return value

    @field_validator("folder", mode="before")
    @classmethod
    def _coerce_folder(cls, value: Any) -> Any:
        if isinstance(value, str):
            return normalize_path(value) or None
        return value

    @classmethod
    def from_frontmatter(cls, frontmatter: Mapping[str, Any]) -> AISuggestion | None:
        """Read the suggestion block, or None when the note was never analyzed.

        Raises:
            ValueError: If the block is present but not a mapping or
                fails validation.
        """
        raw = frontmatter.get(SUGGESTIONS_KEY)
        if raw is None:
            return None
        if not isinstance(raw, Mapping):
            msg = f"{SUGGESTIONS_KEY} must be a mapping, got {type(raw).__name__}"
            raise ValueError(msg)
        return cls.model_validate(dict(raw))


def parse_confidence(value: Any) -> float:
    """Map a suggestion's confidence to a number in ``[0, 1]``.

    Examples:
        >>> parse_confidence("high")
        0.9
        >>> parse_confidence("0.75")
        0.75
        >>> parse_confidence("banana")
        0.5
    """
    if isinstance(value, bool):
        return DEFAULT_CONFIDENCE
    if isinstance(value, (int, float)):
        return _clamp(float(value))
    if isinstance(value, str):
        level = value.strip().lower()
        if level in CONFIDENCE_LEVELS:
            return CONFIDENCE_LEVELS[level]
        try:
            return _clamp(float(level))
        except ValueError:
            return DEFAULT_CONFIDENCE
    return DEFAULT_CONFIDENCE


def _clamp(number: float) -> float:
    if math.isnan(number):
        return DEFAULT_CONFIDENCE
    return min(max(number, 0.0), 1.0)


# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------


def target_path(folder: str, original_path: str) -> str:
    """``<folder>/<basename(original_path)>``."""
    return join(folder, basename(original_path))


def collision_candidate(path: str, attempt: int) -> str:
    """Numbered variant of *path*: ``name.md`` -> ``name-<attempt>.md``.

    Attempt 0 is the path itself.
    """
    if attempt == 0:
        return path
    folder, name = posixpath.split(path)
    stem, ext = posixpath.splitext(name)
    return join(folder, f"{stem}-{attempt}{ext}")


# ---------------------------------------------------------------------------
# Metadata rewrites
# ---------------------------------------------------------------------------


def filed_frontmatter(
    frontmatter: Mapping[str, Any],
    suggestion: AISuggestion,
    *,
    filed_at: str,
    filed_by: str,
) -> dict[str, Any]:
    """Frontmatter for a filed note: tags applied, markers set, suggestions dropped."""
    updates: dict[str, Any] = {}
    if suggestion.tags:
        updates["tags"] = list(suggestion.tags)
    updates["filed_at"] = filed_at
    updates["filed_by"] = filed_by
    return with_updates(frontmatter, updates, remove=(SUGGESTIONS_KEY,))


def queued_frontmatter(frontmatter: Mapping[str, Any], *, queued_at: str) -> dict[str, Any]:
    """Frontmatter for a note routed to manual review."""
    return with_updates(frontmatter, {"review_needed": True, "queued_at": queued_at})


def with_related_section(body: str, related: list[str]) -> str:
    """Append a ``## Related Notes`` section linking each related note."""
    if not related:
        return body
    links = [f"- [[{_link_target(p)}]]" for p in related]
    return body.rstrip("\n") + "\n\n" + RELATED_HEADING + "\n" + "\n".join(links) + "\n"


def _link_target(path: str) -> str:
    path = normalize_path(path)
    if path.lower().endswith(".md"):
        return path[: -len(".md")]
    return path
