"""Logging setup shared by the command line and the API."""

import logging
import sys

import structlog


def configure_logging(level: str = "INFO", fmt: str = "plain") -> None:
    """
    Route structlog through the standard library logger.

    Args:
        level: Log level name (DEBUG, INFO, ...)
        fmt: "json" for JSON lines, anything else for console output
    """
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level}")

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=numeric_level, force=True)

    renderer = (
        structlog.processors.JSONRenderer()
        if fmt == "json"
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
