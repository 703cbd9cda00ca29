"""
Structured logging configuration using structlog.

JSON lines in production, coloured console output elsewhere. Source
fetches log with bound fields (source, capability, count) so a failing
upstream can be traced from the log stream alone.
"""

import logging
import sys

import structlog
from structlog.types import Processor

from vc_intel.config.settings import Settings, get_settings

# Third-party loggers that are too chatty at INFO
_NOISY_LOGGERS = ("httpx", "httpcore", "asyncio")


def setup_logging(settings: Settings | None = None) -> None:
    """
    Configure structlog and the stdlib root logger.

    Usage:
        setup_logging()
        logger = structlog.get_logger(__name__)
        logger.info("Fetched trends", source="hackernews", count=20)
    """
    settings = settings or get_settings()

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.is_production:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # stderr keeps stdout clean for CLI JSON output
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, settings.log_level),
    )

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def bind_context(**kwargs) -> None:
    """Bind context variables (e.g. a request id) to all subsequent log lines."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    """Clear all bound context variables."""
    structlog.contextvars.clear_contextvars()
