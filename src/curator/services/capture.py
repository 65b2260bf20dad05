"""CaptureService — drop raw text into the inbox as a new note."""

from __future__ import annotations

import re
from datetime import UTC, datetime

import structlog

from curator.domain.content import render_frontmatter
from curator.domain.paths import join
from curator.domain.sanitize import sanitize_text
from curator.errors import CuratorError
from curator.services._helpers import capture_stamp
from curator.services.base import BaseService
from curator.services.result import ServiceResult

log = structlog.get_logger(__name__)

_SLUG_WORDS = 5
_SLUG_MAX_LENGTH = 30
_SLUG_STRIP = re.compile(r"[^a-zA-Z0-9-]")


def capture_slug(text: str) -> str:
    """First words of *text* as a filename fragment.

    >>> capture_slug("Buy milk and eggs before the weekend")
    'buy-milk-and-eggs-before'
    """
    words = "-".join(text.split()[:_SLUG_WORDS])
    return _SLUG_STRIP.sub("", words)[:_SLUG_MAX_LENGTH].lower()


class CaptureService(BaseService):
    """Writes captured text to the inbox for later analysis and filing."""

    def capture(self, text: str, source: str = "unknown") -> ServiceResult:
        """Create ``<inbox>/<timestamp>-<first-words>.md`` holding *text*."""
        op = "capture"
        if not text.strip():
            return ServiceResult.failure(op, "EMPTY_CAPTURE", "Nothing to capture")

        moment = datetime.now(UTC)
        filename = f"{capture_stamp(moment)}-{capture_slug(text)}.md"
        path = join(self.settings.vault.inbox_path, filename)

        content = render_frontmatter(
            {"created": moment.isoformat(timespec="milliseconds"), "source": source},
            "\n" + text,
        )
        if self.settings.vault.sanitize_unicode:
            content = sanitize_text(content)

        try:
            self._workspace.store.write(path, content)
        except CuratorError as exc:
            return ServiceResult.failure(op, "STORE_UNAVAILABLE", str(exc), path=path)

        log.info("capture.note_written", path=path, source=source)
        return ServiceResult(ok=True, op=op, data={"path": path, "source": source})
