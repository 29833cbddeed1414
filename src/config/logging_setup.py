"""structlog setup for the dev and prod environments."""

import logging
import sys

import structlog


def configure_logging(environment: str = "dev") -> None:
    """Configure structlog once at process start.

    dev renders colored key/value lines at DEBUG, prod emits JSON at INFO.
    """
    level = logging.DEBUG if environment == "dev" else logging.INFO

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=environment != "dev"),
    ]
    if environment == "dev":
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors.extend([
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ])

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )
