"""Unicode sanitization for replicated vault storage.

The LiveSync replication protocol has historically mis-sized multibyte
UTF-8 payloads, corrupting notes on other devices. Everything the curator
persists is reduced to ASCII first: well-known status symbols become
bracketed tags, emoji are dropped, and any other non-ASCII character is
removed.
"""

from __future__ import annotations

import re
from typing import Any

SYMBOL_REPLACEMENTS: dict[str, str] = {
    "✅": "[DONE]",
    "❌": "[FAIL]",
    "⚠️": "[WARN]",
    "⚠": "[WARN]",
    "→": "->",
    "✓": "[OK]",
    "✗": "[X]",
    "\U0001f4dd": "[NOTE]",
    "\U0001f50d": "[SEARCH]",
    "\U0001f4a1": "[IDEA]",
    "\U0001f3af": "[TARGET]",
    "\U0001f525": "[HOT]",
    "⭐": "[STAR]",
}

_EMOJI_BLOCK = re.compile("[\U0001f300-\U0001f9ff]")
_NON_ASCII = re.compile(r"[^\x00-\x7f]")


def sanitize_text(text: str) -> str:
    """Return *text* reduced to ASCII.

    Examples:
        >>> sanitize_text("✅ shipped → prod")
        '[DONE] shipped -> prod'
        >>> sanitize_text("café \U0001f600")
        'caf '
    """
    for symbol, replacement in SYMBOL_REPLACEMENTS.items():
        text = text.replace(symbol, replacement)
    text = _EMOJI_BLOCK.sub("", text)
    return _NON_ASCII.sub("", text)


def sanitize_value(value: Any) -> Any:
    """Recursively sanitize string values inside dicts and lists.

    Mapping keys are left alone: learned state is keyed by folder paths
    and keywords, which must keep matching the vault and later notes.
    """
    if isinstance(value, str):
        return sanitize_text(value)
    if isinstance(value, list):
        return [sanitize_value(v) for v in value]
    if isinstance(value, dict):
        return {k: sanitize_value(v) for k, v in value.items()}
    return value
