"""structlog configuration for dataonq.

Library modules log through stdlib ``logging`` or ``structlog.get_logger``;
both end up in one handler on stderr, rendered for humans by default or as
JSON lines with ``log_json``. Dispatch code binds a ``sequence_id`` through
structlog context variables so every line of one run can be correlated.
"""

from __future__ import annotations

import logging
import sys
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from typing import IO, TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from dataonq.config.settings import DataOnQSettings

LOGGER_NAME = "dataonq"

_QUIET_LOGGERS = ("pluggy",)


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    stream: IO[str] | None = None,
) -> None:
    """Route stdlib and structlog records through one stderr handler.

    Args:
        verbose: DEBUG for ``dataonq.*`` loggers; otherwise WARNING and up.
        log_json: Render JSON lines instead of console output.
        stream: Output stream, defaults to ``sys.stderr``.
    """
    out = stream or sys.stderr

    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    renderer: structlog.types.Processor
    if log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=out.isatty())

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
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger(LOGGER_NAME).setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def configure_from_settings(settings: DataOnQSettings) -> None:
    configure_logging(verbose=settings.verbose, log_json=settings.log_json)


@contextmanager
def sequence_context(sequence_id: str | None = None) -> Iterator[str]:
    """Bind a ``sequence_id`` to every log line emitted inside the block."""
    bound_id = sequence_id or uuid.uuid4().hex[:12]
    with structlog.contextvars.bound_contextvars(sequence_id=bound_id):
        yield bound_id
