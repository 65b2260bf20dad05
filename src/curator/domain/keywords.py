"""Keyword extraction for correction learning.

A deliberately simple bag-of-words ranking: it only has to tell folders
apart by vocabulary, not understand the note.
"""

from __future__ import annotations

import re
from collections import Counter

MAX_KEYWORDS = 20
MIN_KEYWORD_LENGTH = 4

STOP_WORDS: frozenset[str] = frozenset(
    {
        "this",
        "that",
        "with",
        "from",
        "have",
        "will",
        "been",
        "were",
        "their",
        "what",
        "which",
        "when",
        "where",
        "there",
        "about",
        "would",
        "could",
        "should",
        "these",
        "those",
    }
)

_FRONTMATTER_BLOCK = re.compile(r"---.*?---", re.DOTALL)
_MARKDOWN_SYMBOLS = re.compile(r"[#*`\[\]()]")


def extract_keywords(content: str, limit: int = MAX_KEYWORDS) -> list[str]:
    """Return up to *limit* keywords from *content*, most frequent first.

    The first ``---`` block is removed, markdown symbols become spaces,
    and the text is lower-cased and split on whitespace. Tokens shorter
    than four characters and stop words are dropped. Equal counts keep
    first-occurrence order.

    Examples:
        >>> extract_keywords("Neural nets and neural search")
        ['neural', 'nets', 'search']
    """
    cleaned = _FRONTMATTER_BLOCK.sub("", content, count=1)
    cleaned = _MARKDOWN_SYMBOLS.sub(" ", cleaned).lower()
    words = [w for w in cleaned.split() if len(w) >= MIN_KEYWORD_LENGTH and w not in STOP_WORDS]
    return [word for word, _count in Counter(words).most_common(limit)]
