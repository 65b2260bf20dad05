"""Logging setup — structlog over the stdlib root handler.

Every record, whether it comes from structlog or a plain ``logging``
logger in the storage layer, goes through one stderr handler. Filing and
undo bind the session id with :func:`session_context` so each line of a
batch can be traced back to its ledger entry.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TextIO

import structlog
from structlog.types import Processor

# Third-party loggers that are chatty at INFO (httpx logs every request).
QUIET_LOGGERS: tuple[str, ...] = ("httpx", "httpcore")


def _pre_chain() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _final_chain(log_json: bool, stream: TextIO) -> list[Processor]:
    chain: list[Processor] = [structlog.stdlib.ProcessorFormatter.remove_processors_meta]
    if log_json:
        chain += [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    else:
        chain.append(structlog.dev.ConsoleRenderer(colors=stream.isatty()))
    return chain


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Route structlog and stdlib logging to a single handler.

    Args:
        verbose: Let ``curator.*`` loggers through at DEBUG. Otherwise
            only warnings and errors are shown.
        log_json: Emit one JSON object per line instead of console text.
        stream: Destination, ``sys.stderr`` when omitted. Stdout is kept
            for command output.
    """
    out = stream if stream is not None else sys.stderr
    pre_chain = _pre_chain()

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(out)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=_final_chain(log_json, out),
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(logging.WARNING)

    logging.getLogger("curator").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


@contextmanager
def session_context(session_id: str) -> Iterator[None]:
    """Tag every log line emitted inside the block with *session_id*."""
    with structlog.contextvars.bound_contextvars(session_id=session_id):
        yield
