"""Shared service-layer helper functions."""

from __future__ import annotations

from datetime import UTC, datetime


def now_iso() -> str:
    """Current UTC time as ISO 8601 with fixed microsecond precision.

    Fixed precision keeps timestamps lexicographically sortable.
    """
    return datetime.now(UTC).isoformat(timespec="microseconds")


def capture_stamp(moment: datetime) -> str:
    """``YYYY-MM-DD-HHMMSS`` stamp used in captured note filenames."""
    return moment.strftime("%Y-%m-%d-%H%M%S")
