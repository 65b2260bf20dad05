"""Filing session identifiers.

Format: ``filer-<epoch milliseconds>-<8 hex chars>``. The random suffix
keeps ids unique across concurrent invocations within the same
millisecond.
"""

from __future__ import annotations

import re
import secrets
import time

SESSION_PREFIX = "filer-"
SESSION_ID_PATTERN = re.compile(r"^filer-\d+-[0-9a-f]{8}$")


def generate_session_id() -> str:
    """Generate a new filing session id."""
    millis = time.time_ns() // 1_000_000
    return f"{SESSION_PREFIX}{millis}-{secrets.token_hex(4)}"
