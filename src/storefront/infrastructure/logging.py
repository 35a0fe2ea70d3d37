"""Logging configuration for the storefront.

Modules log through ``structlog.get_logger(__name__)``; this sets up the
processors once, at CLI start-up.  Records are handed to the standard
library and written to stderr so they never mix with command output.
"""

import logging
import sys

import structlog


def setup_stdlib_logging(level: str) -> None:
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers = []

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    root_logger.addHandler(handler)

    # Suppress noisy library loggers
    logging.getLogger("sqlalchemy").setLevel(logging.WARNING)


def setup_structlog(json: bool) -> None:
    renderer = (
        structlog.processors.JSONRenderer()
        if json
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging(level: str = "INFO", json: bool = False) -> None:
    """Configure all logging for the application."""
    setup_stdlib_logging(level)
    setup_structlog(json)
