"""Structured logging setup utilities."""

from __future__ import annotations

import logging
from typing import Iterable

import structlog

from hourglass.redaction import redact_secrets


def configure_logging(
    handlers: Iterable[logging.Handler] | None = None,
    level: int = logging.WARNING,
) -> None:
    """Configure stdlib logging and structlog with JSON output on stderr."""

    if handlers is None:
        handlers = [logging.StreamHandler()]

    logging.basicConfig(
        level=level,
        handlers=list(handlers),
        format="%(message)s",
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            redact_secrets,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
