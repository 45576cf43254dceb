# ABOUTME: structlog configuration shared by the CLI and the web application.
# ABOUTME: Console rendering for development, JSON lines for production.

import logging
import sys

import structlog

from newsletter_analytics.config import get_settings


def configure_logging() -> None:
    """Configure structlog for console or JSON output.

    All log output goes to stderr so CLI reports on stdout stay valid JSON.
    Standard library loggers (SQLAlchemy, uvicorn) use the same level.
    """
    settings = get_settings()
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)
    json_output = settings.log_format == "json"

    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=log_level)

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso" if json_output else "%Y-%m-%d %H:%M:%S"),
    ]
    if json_output:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(sys.stderr),
        cache_logger_on_first_use=True,
    )
